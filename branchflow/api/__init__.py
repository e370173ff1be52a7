"""
API layer - FastAPI surface for Branchflow.

Routes translate HTTP requests into application service calls and map the
domain error taxonomy onto RFC 7807 problem responses. No business rules
live here.
"""

"""
Application layer - Use cases and orchestration for Branchflow.

This layer contains:
- Application services (event lifecycle, admission control, proctor ledger)
- Port definitions (Protocols implemented by infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, api
"""

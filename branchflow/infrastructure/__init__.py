"""
Infrastructure layer - External adapters for Branchflow.

This layer contains:
- In-memory stubs for every port (development and tests)
- PostgreSQL adapters (SQLAlchemy async)
- Observability (structlog configuration, correlation ids)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

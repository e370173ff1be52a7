"""HTTP middleware."""

from branchflow.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]

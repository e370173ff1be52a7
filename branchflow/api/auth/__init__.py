"""Caller identity extraction for API routes."""

from branchflow.api.auth.member_auth import MEMBER_HEADER, get_member_id

__all__ = ["MEMBER_HEADER", "get_member_id"]

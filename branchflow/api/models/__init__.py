"""Pydantic request/response models for the Branchflow API."""

"""Composition root: builds ports and services from configuration."""

from branchflow.bootstrap.logging import configure_logging
from branchflow.bootstrap.workflow import (
    WorkflowContainer,
    build_container,
    build_memory_container,
    build_postgres_container,
    get_workflow_container,
    reset_workflow_container,
    set_workflow_container,
)

__all__ = [
    "WorkflowContainer",
    "build_container",
    "build_memory_container",
    "build_postgres_container",
    "configure_logging",
    "get_workflow_container",
    "reset_workflow_container",
    "set_workflow_container",
]

"""Configuration for Branchflow."""

from branchflow.config.workflow_config import (
    DEFAULT_WORKFLOW_CONFIG,
    AppConfig,
    WorkflowConfig,
)

__all__ = ["DEFAULT_WORKFLOW_CONFIG", "AppConfig", "WorkflowConfig"]

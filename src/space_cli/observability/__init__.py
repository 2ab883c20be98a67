"""Observability package."""
from space_cli.observability.logging import (
    setup_logging,
    with_upload_context,
)

__all__ = ["setup_logging", "with_upload_context"]

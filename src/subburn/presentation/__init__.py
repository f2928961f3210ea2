"""Presentation layer package."""

from subburn.presentation.cli import main, create_supervisor_from_config

__all__ = ["main", "create_supervisor_from_config"]

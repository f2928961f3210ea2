"""Configuration package."""

from subburn.infrastructure.config.loader import ConfigLoader, SupervisorConfig, default_output_dir

__all__ = ["ConfigLoader", "SupervisorConfig", "default_output_dir"]

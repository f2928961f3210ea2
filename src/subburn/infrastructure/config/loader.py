"""Configuration loading and validation."""

import os
import sys
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, fields

from subburn.domain.exceptions import ConfigurationError
from subburn.domain.models import DEFAULT_SUBTITLE_ENCODING, SOFTWARE_CODECS
from subburn.shared.logging import get_logger

logger = get_logger(__name__)


def _is_windows() -> bool:
    return os.name == "nt" or sys.platform.startswith("win")


def _binary_name(base: str) -> str:
    return f"{base}.exe" if _is_windows() else base


def default_output_dir() -> Path:
    """The user's Videos folder when it exists, otherwise the home directory."""
    home = Path.home()
    videos = home / "Videos"
    return videos if videos.is_dir() else home


@dataclass
class SupervisorConfig:
    """Configuration for the encode job supervisor."""

    # External tools
    ffmpeg_bin: str = field(default_factory=lambda: _binary_name("ffmpeg"))
    ffprobe_bin: str = field(default_factory=lambda: _binary_name("ffprobe"))

    # Encoding defaults
    default_codec: str = "libx264"
    preset: str = "medium"
    default_subtitle_encoding: str = DEFAULT_SUBTITLE_ENCODING
    custom_force_style: str = "PrimaryColour=&H00FFFFFF"
    output_suffix: str = "_sub"
    default_output_dir: Path = field(default_factory=default_output_dir)

    # Runtime behaviour
    progress_interval: float = 0.2
    lock_timeout: float = 5.0
    stop_wait_timeout: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.default_output_dir = Path(self.default_output_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        self._validate()

    def _validate(self):
        if not self.ffmpeg_bin or not self.ffprobe_bin:
            raise ConfigurationError("ffmpeg_bin and ffprobe_bin must not be empty")

        if self.default_codec not in SOFTWARE_CODECS:
            raise ConfigurationError(f"default_codec must be one of {SOFTWARE_CODECS}, got: {self.default_codec}")

        if self.progress_interval < 0:
            raise ConfigurationError(f"progress_interval cannot be negative, got: {self.progress_interval}")

        if self.lock_timeout <= 0:
            raise ConfigurationError(f"lock_timeout must be positive, got: {self.lock_timeout}")

        if self.stop_wait_timeout < 0:
            raise ConfigurationError(f"stop_wait_timeout cannot be negative, got: {self.stop_wait_timeout}")

        if not isinstance(self.log_level, str) or \
                self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")


class ConfigLoader:
    """Loads and validates configuration from YAML files and environment variables."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to YAML config file
        """
        self.config_path = Path(config_path) if config_path else Path("subburn.yaml")
        self._logger = get_logger(__name__)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> SupervisorConfig:
        """
        Load configuration from file and environment.

        Precedence, lowest first: YAML file, environment, overrides.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        if self.config_path.exists():
            self._logger.info(f"Loading config from {self.config_path}")
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(yaml_config, dict):
                raise ConfigurationError(f"Config file must contain a mapping: {self.config_path}")
            config_dict.update(yaml_config)
        else:
            self._logger.debug(f"Config file not found: {self.config_path}")

        config_dict.update(self._load_from_env())

        if overrides:
            for k, v in overrides.items():
                if v is None:
                    continue
                config_dict[k] = v

        valid_fields = {f.name for f in fields(SupervisorConfig)}
        unknown = sorted(k for k in config_dict if k not in valid_fields)
        if unknown:
            self._logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}

        try:
            return SupervisorConfig(**filtered_config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def _load_from_env(self) -> Dict[str, Any]:
        env_config: Dict[str, Any] = {}

        if ffmpeg := os.getenv("SUBBURN_FFMPEG") or os.getenv("FFMPEG_BIN"):
            env_config["ffmpeg_bin"] = ffmpeg

        if ffprobe := os.getenv("SUBBURN_FFPROBE") or os.getenv("FFPROBE_BIN"):
            env_config["ffprobe_bin"] = ffprobe

        if output_dir := os.getenv("SUBBURN_OUTPUT_DIR"):
            env_config["default_output_dir"] = Path(output_dir)

        for name, key in (
            ("SUBBURN_PROGRESS_INTERVAL", "progress_interval"),
            ("SUBBURN_LOCK_TIMEOUT", "lock_timeout"),
            ("SUBBURN_STOP_WAIT_TIMEOUT", "stop_wait_timeout"),
        ):
            if value := os.getenv(name):
                try:
                    env_config[key] = float(value)
                except ValueError:
                    self._logger.warning(f"Invalid {name} value: {value}")

        if level := os.getenv("SUBBURN_LOG_LEVEL"):
            env_config["log_level"] = level.upper()

        if log_file := os.getenv("SUBBURN_LOG_FILE"):
            env_config["log_file"] = Path(log_file)

        return env_config

"""Test configuration loader."""

import pytest
from pathlib import Path

from subburn.domain.exceptions import ConfigurationError
from subburn.infrastructure.config import ConfigLoader, SupervisorConfig

ENV_VARS = (
    "SUBBURN_FFMPEG", "FFMPEG_BIN", "SUBBURN_FFPROBE", "FFPROBE_BIN",
    "SUBBURN_OUTPUT_DIR", "SUBBURN_PROGRESS_INTERVAL", "SUBBURN_LOCK_TIMEOUT",
    "SUBBURN_STOP_WAIT_TIMEOUT", "SUBBURN_LOG_LEVEL", "SUBBURN_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path):
    """Test defaults when no config file exists."""
    config = ConfigLoader(tmp_path / "missing.yaml").load()

    assert config.default_codec == "libx264"
    assert config.preset == "medium"
    assert config.progress_interval == 0.2
    assert config.output_suffix == "_sub"
    assert config.ffmpeg_bin in ("ffmpeg", "ffmpeg.exe")


def test_yaml_file(tmp_path):
    """Test values are read from YAML."""
    path = tmp_path / "subburn.yaml"
    path.write_text(
        "ffmpeg_bin: /opt/ffmpeg/bin/ffmpeg\n"
        "preset: slow\n"
        "progress_interval: 0.5\n"
        "default_output_dir: /srv/videos\n",
        encoding="utf-8",
    )

    config = ConfigLoader(path).load()

    assert config.ffmpeg_bin == "/opt/ffmpeg/bin/ffmpeg"
    assert config.preset == "slow"
    assert config.progress_interval == 0.5
    assert config.default_output_dir == Path("/srv/videos")


def test_env_overrides_file(tmp_path, monkeypatch):
    """Test environment takes precedence over YAML."""
    path = tmp_path / "subburn.yaml"
    path.write_text("ffmpeg_bin: /from/yaml\nlock_timeout: 2\n", encoding="utf-8")
    monkeypatch.setenv("FFMPEG_BIN", "/from/env")
    monkeypatch.setenv("SUBBURN_LOCK_TIMEOUT", "7.5")
    monkeypatch.setenv("SUBBURN_LOG_LEVEL", "debug")

    config = ConfigLoader(path).load()

    assert config.ffmpeg_bin == "/from/env"
    assert config.lock_timeout == 7.5
    assert config.log_level == "DEBUG"


def test_overrides_win_and_none_is_skipped(tmp_path, monkeypatch):
    monkeypatch.setenv("SUBBURN_FFPROBE", "/from/env")

    config = ConfigLoader(tmp_path / "missing.yaml").load({"ffprobe_bin": None, "log_level": "WARNING"})

    assert config.ffprobe_bin == "/from/env"
    assert config.log_level == "WARNING"


def test_invalid_env_number_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("SUBBURN_PROGRESS_INTERVAL", "fast")

    config = ConfigLoader(tmp_path / "missing.yaml").load()

    assert config.progress_interval == 0.2


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "subburn.yaml"
    path.write_text("preset: fast\nupload_bucket: videos\n", encoding="utf-8")

    config = ConfigLoader(path).load()

    assert config.preset == "fast"
    assert not hasattr(config, "upload_bucket")


@pytest.mark.parametrize("content", ["preset: [unclosed\n", "- just\n- a list\n"])
def test_bad_yaml_raises(tmp_path, content):
    path = tmp_path / "subburn.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(path).load()


def test_wrong_value_type_raises(tmp_path):
    path = tmp_path / "subburn.yaml"
    path.write_text("progress_interval: soon\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(path).load()


def test_numeric_log_level_raises(tmp_path):
    path = tmp_path / "subburn.yaml"
    path.write_text("log_level: 10\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(path).load()


@pytest.mark.parametrize("kwargs", [
    {"default_codec": "h264_nvenc"},
    {"progress_interval": -1.0},
    {"lock_timeout": 0},
    {"stop_wait_timeout": -0.1},
    {"log_level": "LOUD"},
    {"log_level": 10},
    {"ffmpeg_bin": ""},
])
def test_config_validation(kwargs):
    """Test invalid values raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        SupervisorConfig(**kwargs)

"""Tests for config.py -- defaults, env var overrides, root dir checks."""

from pathlib import Path

import pytest

from epub_intake.config import IntakeConfig
from epub_intake.errors import ConfigError

# Env vars that pydantic-settings reads -- must be cleaned for default tests
_CONFIG_ENV_VARS = [
    "ROOT_DIR", "LOG_DIR", "EXTRACTION_TIMEOUT", "SETTLE_DELAY",
    "DRY_RUN", "VERBOSE", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove intake env vars so defaults tests see actual defaults."""
    for var in _CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_default_values(self):
        config = IntakeConfig(_env_file=None)
        assert config.root_dir is None
        assert config.log_dir is None
        assert config.extraction_timeout == 5.0
        assert config.settle_delay == 1.0
        assert config.dry_run is False
        assert config.verbose is False
        assert config.log_level == "INFO"


class TestOverrides:
    def test_constructor_override(self, tmp_path):
        config = IntakeConfig(_env_file=None, root_dir=tmp_path, dry_run=True)
        assert config.root_dir == tmp_path
        assert config.dry_run is True

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("EXTRACTION_TIMEOUT", "2.5")
        monkeypatch.setenv("SETTLE_DELAY", "0")
        monkeypatch.setenv("DRY_RUN", "true")
        config = IntakeConfig(_env_file=None)
        assert config.extraction_timeout == 2.5
        assert config.settle_delay == 0.0
        assert config.dry_run is True

    def test_root_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROOT_DIR", str(tmp_path))
        config = IntakeConfig(_env_file=None)
        assert config.root_dir == tmp_path

    def test_root_dir_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"ROOT_DIR={tmp_path}\nSETTLE_DELAY=3\n")
        config = IntakeConfig(_env_file=env_file)
        assert config.root_dir == tmp_path
        assert config.settle_delay == 3.0

    def test_env_beats_env_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=WARNING\n")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = IntakeConfig(_env_file=env_file)
        assert config.log_level == "DEBUG"


class TestRequireRootDir:
    def test_missing(self):
        with pytest.raises(ConfigError, match="ROOT_DIR is not defined"):
            IntakeConfig(_env_file=None).require_root_dir()

    def test_not_a_directory(self, tmp_path):
        config = IntakeConfig(_env_file=None, root_dir=tmp_path / "nope")
        with pytest.raises(ConfigError, match="not a directory"):
            config.require_root_dir()

    def test_resolves(self, tmp_path):
        config = IntakeConfig(_env_file=None, root_dir=tmp_path / ".")
        assert config.require_root_dir() == tmp_path.resolve()

    def test_empty_env_root_is_missing(self, monkeypatch):
        monkeypatch.setenv("ROOT_DIR", "")
        with pytest.raises(ConfigError, match="ROOT_DIR is not defined"):
            IntakeConfig(_env_file=None).require_root_dir()

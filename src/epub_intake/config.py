"""Intake configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class IntakeConfig(BaseSettings):
    """All intake configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # -- Directories --
    root_dir: Path | None = None
    log_dir: Path | None = None

    # -- Timing (seconds) --
    extraction_timeout: float = 5.0
    settle_delay: float = 1.0

    # -- Behavior --
    dry_run: bool = False
    verbose: bool = False
    log_level: str = "INFO"

    def require_root_dir(self) -> Path:
        """Return the resolved root directory or raise ConfigError."""
        if self.root_dir is None or not str(self.root_dir).strip():
            raise ConfigError("ROOT_DIR is not defined (set it in .env or the environment)")
        root = self.root_dir.expanduser().resolve()
        if not root.is_dir():
            raise ConfigError(f"ROOT_DIR is not a directory: {root}")
        return root

    def setup_logging(self) -> None:
        """Configure loguru for the intake service."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<10} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        if self.log_dir is None:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "intake.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )

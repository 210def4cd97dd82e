"""CLI entry point for the EPUB intake service."""

import asyncio
import sys
from pathlib import Path

import click
from loguru import logger

from .config import IntakeConfig
from .errors import ConfigError
from .runner import IntakeRunner

log = logger.bind(stage="cli")


def _find_config_file() -> Path | None:
    """Look for .env next to the package or in cwd."""
    pkg_dir = Path(__file__).resolve().parent
    for candidate in [
        pkg_dir.parent.parent / ".env",  # dev: src/../.env
        Path.cwd() / ".env",
    ]:
        if candidate.is_file():
            return candidate
    return None


@click.command()
@click.argument(
    "root_dir",
    required=False,
    type=click.Path(file_okay=False),
)
@click.option(
    "--once", is_flag=True, help="Sort files already present, then exit."
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would happen without doing it."
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for metadata extraction (default 5).",
)
@click.option(
    "--settle",
    type=float,
    default=None,
    help="Seconds to wait after a file appears before processing (default 1).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to .env file.",
)
def main(
    root_dir: str | None,
    once: bool,
    dry_run: bool,
    timeout: float | None,
    settle: float | None,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Sort incoming EPUB files into author and series folders.

    ROOT_DIR defaults to the ROOT_DIR environment variable (or .env entry).
    """
    env_file = Path(config_file) if config_file else _find_config_file()

    # Only pass flags that were given so env/.env values still apply
    config_kwargs: dict[str, object] = {}
    if root_dir:
        config_kwargs["root_dir"] = Path(root_dir)
    if dry_run:
        config_kwargs["dry_run"] = True
    if verbose:
        config_kwargs["verbose"] = True
        config_kwargs["log_level"] = "DEBUG"
    if timeout is not None:
        config_kwargs["extraction_timeout"] = timeout
    if settle is not None:
        config_kwargs["settle_delay"] = settle

    config = IntakeConfig(_env_file=env_file, **config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()
    if env_file:
        log.debug(f"Loaded env from {env_file}")

    try:
        root = config.require_root_dir()
    except ConfigError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    runner = IntakeRunner(config=config, root_dir=root)
    try:
        asyncio.run(runner.run(once=once))
    except KeyboardInterrupt:
        log.info("Shutdown requested")

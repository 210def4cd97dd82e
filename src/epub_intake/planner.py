"""Destination folder and file naming from book metadata."""

from loguru import logger

from .models import (
    EPUB_EXTENSION,
    UNKNOWN_AUTHOR,
    UNKNOWN_TITLE,
    DestinationPlan,
    Metadata,
)
from .sanitize import sanitize

log = logger.bind(stage="planner")


def _present(value: str | None) -> str | None:
    if value and value.strip():
        return value
    return None


def plan(metadata: Metadata, extension: str = EPUB_EXTENSION) -> DestinationPlan:
    """Build the destination for a book. Never fails.

    File name is "<title>_<author><ext>". The folder is the series when
    one is set, otherwise the author. Author resolution order is
    creator, then author, then "Unknown_Author".
    """
    title = _present(metadata.title) or UNKNOWN_TITLE
    author = _present(metadata.creator) or _present(metadata.author) or UNKNOWN_AUTHOR
    series = _present(metadata.series)

    safe_title = sanitize(title, fallback=UNKNOWN_TITLE)
    safe_author = sanitize(author, fallback=UNKNOWN_AUTHOR)
    file_name = f"{safe_title}_{safe_author}{extension.lower()}"
    folder_name = sanitize(series, fallback=safe_author) if series else safe_author

    result = DestinationPlan(folder_name=folder_name, file_name=file_name)
    log.debug(f"plan: {result}")
    return result

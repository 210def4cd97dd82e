"""EPUB metadata extraction via ebooklib, bounded by a timeout."""

import asyncio
from collections.abc import Callable
from pathlib import Path

from ebooklib import epub
from loguru import logger

from .errors import ExtractionError, ExtractionTimeout
from .models import Metadata

log = logger.bind(stage="extract")

DEFAULT_TIMEOUT = 5.0

MetadataReader = Callable[[Path], Metadata]


def _first_value(items: list[tuple[str | None, dict | None]]) -> str | None:
    """Return the first non-blank value from an ebooklib metadata list."""
    for value, _attrs in items:
        if value and value.strip():
            return value.strip()
    return None


def _author_contributor(items: list[tuple[str | None, dict | None]]) -> str | None:
    """Pick a dc:contributor flagged with the 'aut' (author) role."""
    for value, attrs in items:
        if not value or not value.strip():
            continue
        roles = [v for k, v in (attrs or {}).items() if k.endswith("role")]
        if "aut" in roles:
            return value.strip()
    return None


def _series(metadata: dict) -> str | None:
    """Find the series name in OPF <meta> entries.

    Recognizes calibre's <meta name="calibre:series" content="..."/> and
    EPUB 3 <meta property="belongs-to-collection">...</meta>. ebooklib
    files these under different namespace keys depending on how the OPF
    was written, so every namespace is scanned.
    """
    for entries in metadata.values():
        for items in entries.values():
            for value, attrs in items:
                attrs = attrs or {}
                if attrs.get("name") == "calibre:series":
                    content = (attrs.get("content") or "").strip()
                    if content:
                        return content
                if attrs.get("property") == "belongs-to-collection":
                    if value and value.strip():
                        return value.strip()
    return None


def read_epub_metadata(path: Path) -> Metadata:
    """Parse an EPUB and return its bibliographic metadata (blocking)."""
    log.debug(f"read_epub_metadata(path={path})")

    book = epub.read_epub(str(path), options={"ignore_ncx": True})
    return Metadata(
        title=_first_value(book.get_metadata("DC", "title")),
        creator=_first_value(book.get_metadata("DC", "creator")),
        author=_author_contributor(book.get_metadata("DC", "contributor")),
        series=_series(book.metadata),
    )


async def extract(
    path: Path,
    timeout: float = DEFAULT_TIMEOUT,
    reader: MetadataReader = read_epub_metadata,
) -> Metadata:
    """Extract metadata from path, giving up after timeout seconds.

    The reader runs in a worker thread so the event loop stays free. On
    timeout the thread cannot be interrupted; it is abandoned and its
    result discarded.

    Raises ExtractionTimeout when the deadline passes and ExtractionError
    for any parser failure.
    """
    log.debug(f"extract(path={path}, timeout={timeout})")

    try:
        metadata = await asyncio.wait_for(asyncio.to_thread(reader, path), timeout)
    except TimeoutError:
        raise ExtractionTimeout(path, timeout) from None
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(path, str(e) or type(e).__name__) from e

    log.debug(f"Metadata extracted: {metadata}")
    return metadata

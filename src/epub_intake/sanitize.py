"""Filename sanitization for folder and file name components."""

import re

from loguru import logger

log = logger.bind(stage="sanitize")

MAX_COMPONENT_BYTES = 100

# Windows device names, reserved regardless of extension
RESERVED_NAMES: frozenset[str] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)

_UNSAFE = re.compile(r'[/\\:"*?<>|;\x00-\x1f\x7f\s]+')


def _truncate(name: str) -> str:
    """Cut name to MAX_COMPONENT_BYTES without splitting a character."""
    original_len = len(name.encode("utf-8"))
    if original_len <= MAX_COMPONENT_BYTES:
        return name
    while len(name.encode("utf-8")) > MAX_COMPONENT_BYTES:
        name = name[:-1]
    name = name.rstrip("._")
    log.debug(f"Truncated component from {original_len} bytes: {name!r}")
    return name


def sanitize(value: str | None, fallback: str = "Unknown") -> str:
    """Sanitize a single path component (not a full path).

    Replaces separators, reserved characters, control characters and
    whitespace with underscores, collapses repeated underscores, strips
    leading/trailing dots and underscores, prefixes Windows device names,
    and truncates to MAX_COMPONENT_BYTES. Returns fallback when nothing
    usable is left. sanitize(sanitize(x)) == sanitize(x).
    """
    log.debug(f"sanitize(value={value!r})")

    sanitized = _UNSAFE.sub("_", value or "")
    sanitized = re.sub(r"__+", "_", sanitized)
    sanitized = sanitized.strip("._")

    sanitized = _truncate(sanitized)

    # Checked after truncation, which can expose a bare device name
    if sanitized.split(".")[0].upper() in RESERVED_NAMES:
        sanitized = _truncate(f"Book_{sanitized}")

    return sanitized or fallback

"""EPUB Intake -- watch a directory and file incoming e-books by their metadata.

Core modules:
    config    -- Configuration via pydantic-settings (ROOT_DIR, timeouts, logging)
    cli       -- Click CLI entry point. CLI flags passed as kwargs to
                 IntakeConfig (no env pollution).
    runner    -- Startup sweep followed by the long-running directory watch
    processor -- Per-file state machine: extension check, extraction,
                 planning, move. Never raises; failures leave the file in place.
    extract   -- EPUB metadata via ebooklib, bounded by a timeout
    planner   -- "<folder>/<title>_<author>.epub" naming; folder is the series
                 when present, otherwise the author
    mover     -- Folder creation and non-overwriting rename, serialized per
                 destination path
    sanitize  -- Path component sanitization for filesystem safety
    sweep     -- One-shot pass over files already in the root directory
    watcher   -- watchdog observer feeding direct children of root to asyncio
"""

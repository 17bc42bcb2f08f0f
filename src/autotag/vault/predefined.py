"""Loader for the predefined tag list."""

from pathlib import Path

import fsspec
from loguru import logger


def load_predefined_tags(path: str | Path) -> list[str]:
    """Read candidate tags, one per line.

    A leading marker is optional and blank lines are ignored. Entries are
    returned as written (trimmed); validation happens downstream.

    Args:
        path: Path to a UTF-8 text file.

    Returns:
        List of candidate tag strings in file order.

    Raises:
        OSError: If the file cannot be read.
    """
    with fsspec.open(str(Path(path).expanduser()), "r", encoding="utf-8") as f:
        tags = [line.strip() for line in f if line.strip()]
    logger.debug(f"Loaded {len(tags)} predefined tags from {path}")
    return tags

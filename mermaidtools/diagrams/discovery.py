"""Diagram file discovery."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from .loader import DIAGRAM_EXTENSION

logger = logging.getLogger(__name__)


def _walk(directory: Path, recursive: bool) -> Iterator[Path]:
    """Yield diagram files in ``directory`` in file-system order."""
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        logger.warning(f"Cannot read directory {directory}: {e}")
        return

    found = 0
    for entry in entries:
        try:
            is_file = entry.is_file()
            is_dir = not is_file and entry.is_dir()
        except OSError as e:
            logger.warning(f"Skipping {entry.path}: {e}")
            continue

        path = Path(entry.path)
        if is_file and path.suffix == DIAGRAM_EXTENSION:
            found += 1
            yield path
        elif is_dir and recursive:
            yield from _walk(path, recursive)

    logger.debug(f"Processed {found} files in {directory}")


def discover(path: Path, recursive: bool = False) -> list[Path]:
    """Resolve an input path to the diagram files it designates.

    An explicit file is returned as-is whatever its extension; for a
    directory only ``.mermaid`` files are collected, descending into
    subdirectories when ``recursive`` is set.

    Args:
        path: Input file or directory
        recursive: Whether to descend into subdirectories

    Returns:
        Diagram file paths
    """
    if path.is_file():
        return [path]

    return list(_walk(path, recursive))

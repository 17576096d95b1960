"""Diagram file loading."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.models import DiagramSource

logger = logging.getLogger(__name__)

DIAGRAM_EXTENSION = ".mermaid"


def normalize_newlines(text: str) -> str:
    """Turn literal backslash-n sequences into real newlines."""
    return text.replace("\\n", "\n")


def load_diagram(path: Path) -> DiagramSource | None:
    """Read a diagram file.

    Args:
        path: Diagram file path

    Returns:
        Loaded diagram, or None when the file is not a .mermaid file
    """
    if path.suffix != DIAGRAM_EXTENSION:
        logger.debug(f"Skipping non-mermaid file: {path}")
        return None

    # Undecodable bytes become U+FFFD; Mermaid reports them as a syntax error.
    text = path.read_text(encoding="utf-8", errors="replace")
    return DiagramSource(path=path, text=normalize_newlines(text))

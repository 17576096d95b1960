"""Mermaidtools - Mermaid diagram exporter.

Renders .mermaid sources to PNG, SVG or PDF through a headless browser.
"""

__version__ = "1.0.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]

"""Interactive diagram entry: collect, configure, render."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable

import typer

from ..config.resolver import ensure_output_dir, override_options
from ..core.models import OutputFormat, RenderOptions, RenderResult, Theme
from ..diagrams.loader import DIAGRAM_EXTENSION
from ..rendering import engine

logger = logging.getLogger(__name__)

END_TOKEN = "END"

LineReader = Callable[[str], str]


def collect_diagram(read_line: LineReader) -> str:
    """Read diagram lines until a line containing only END (or end of input)."""
    lines: list[str] = []
    while True:
        try:
            line = read_line("> ")
        except EOFError:
            break
        if line.strip() == END_TOKEN:
            break
        lines.append(line + "\n")
    return "".join(lines)


def _ask(read_line: LineReader, question: str, default: str) -> str:
    try:
        answer = read_line(f"{question} [{default}]: ")
    except EOFError:
        return default
    return answer.strip() or default


def configure(read_line: LineReader, options: RenderOptions) -> RenderOptions:
    """Prompt for format, output file and theme on top of ``options``."""
    fmt = _ask(read_line, "Output format (pdf, png, svg)", OutputFormat.PNG.value)
    options = override_options(options, {"format": fmt}, "prompt")

    output_file = _ask(read_line, "Output file", f"diagram.{options.format.value}")
    theme = _ask(
        read_line,
        "Theme (default, forest, dark, neutral)",
        Theme.DEFAULT.value,
    )
    options = override_options(options, {"theme": theme}, "prompt")

    output_path = Path(output_file)
    return options.model_copy(
        update={"output": output_path.parent, "output_filename": output_path.name}
    )


def render_diagram_text(
    diagram: str,
    options: RenderOptions,
    session_factory: engine.SessionFactory | None = None,
) -> RenderResult | None:
    """Render entered text through the same path as file processing.

    The text goes through a throwaway ``.mermaid`` file that is removed
    afterwards whatever the outcome.
    """
    fd, tmp_name = tempfile.mkstemp(prefix="mermaid_", suffix=DIAGRAM_EXTENSION)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(diagram)
        ensure_output_dir(options)
        return engine.render_file(tmp_path, options, session_factory)
    finally:
        tmp_path.unlink(missing_ok=True)


def run_interactive(
    options: RenderOptions,
    read_line: LineReader = input,
    session_factory: engine.SessionFactory | None = None,
) -> RenderResult | None:
    """Run one interactive session.

    Args:
        options: Base options (from defaults, config file and command line)
        read_line: Prompts and returns one line of input
        session_factory: Provides a browser for the render

    Returns:
        Render result, or None when no diagram was entered
    """
    typer.echo("=== Interactive Mode ===")
    typer.echo(
        f'Enter your Mermaid diagram code (type "{END_TOKEN}" on a new line when finished):'
    )

    diagram = collect_diagram(read_line)
    if not diagram.strip():
        logger.error("No diagram code provided. Exiting.")
        return None

    session_options = configure(read_line, options)

    logger.info("Generating diagram...")
    result = render_diagram_text(diagram, session_options, session_factory)

    if result is not None and result.ok:
        logger.info(f"Output saved to: {result.output_path}")
    else:
        logger.error("Error generating diagram")
    return result

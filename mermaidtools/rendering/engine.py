"""Diagram rendering engine."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..core.models import DiagramSource, OutputFormat, RenderOptions, RenderResult
from ..diagrams.discovery import discover
from ..diagrams.loader import load_diagram
from .browser import browser_session
from .io import atomic_write_bytes, atomic_write_text
from .page import build_page

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Any]]

RENDER_TIMEOUT_MS = 10_000
SVG_SELECTOR = ".mermaid svg"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
SVG_NAMESPACE = 'xmlns="http://www.w3.org/2000/svg"'
XLINK_NAMESPACE = 'xmlns:xlink="http://www.w3.org/1999/xlink"'

ERROR_TEXT_SCRIPT = """() => {
  const texts = Array.from(document.querySelectorAll('.mermaid .error-text'))
    .map((node) => node.textContent.trim())
    .filter(Boolean);
  if (texts.length > 0) {
    return texts.join('\\n');
  }
  if (document.querySelector('.mermaid .error-icon, .mermaid error-icon')) {
    return 'Syntax error in text';
  }
  return null;
}"""

SCALE_SCRIPT = """(scale) => {
  const svg = document.querySelector('.mermaid svg');
  if (svg) {
    svg.style.transform = `scale(${scale})`;
    svg.style.transformOrigin = 'center center';
  }
}"""


class RenderError(Exception):
    """Raised when a diagram cannot be rendered."""

    kind = "generic-failure"


class DiagramSyntaxError(RenderError):
    """Raised when Mermaid reports an error for the diagram source."""

    kind = "syntax-error"


class RenderTimeoutError(RenderError):
    """Raised when Mermaid produces no output within the wait window."""

    kind = "timeout"


class UnsupportedFormatError(RenderError):
    """Raised when the requested export format is not supported."""

    kind = "unsupported-format"


def standalone_svg(markup: str) -> str:
    """Prefix SVG markup with an XML declaration and required namespaces."""
    head, sep, rest = markup.partition("<svg")
    if not sep:
        raise RenderError("Rendered markup contains no <svg> element")

    missing = [ns for ns in (SVG_NAMESPACE, XLINK_NAMESPACE) if ns not in markup]
    if missing:
        rest = " " + " ".join(missing) + rest

    return XML_DECLARATION + head + sep + rest


def _wait_for_svg(page: Any) -> None:
    try:
        page.wait_for_selector(SVG_SELECTOR, timeout=RENDER_TIMEOUT_MS)
    except PlaywrightTimeoutError as e:
        message = page.evaluate(ERROR_TEXT_SCRIPT)
        if message:
            raise DiagramSyntaxError(f"Mermaid syntax error: {message}") from e
        raise RenderTimeoutError(
            "Timeout waiting for diagram to render. Check your diagram syntax."
        ) from e

    # Mermaid draws its error graphic as an SVG as well.
    message = page.evaluate(ERROR_TEXT_SCRIPT)
    if message:
        raise DiagramSyntaxError(f"Mermaid syntax error: {message}")


def _export_svg(page: Any, element: Any, output_path: Path, options: RenderOptions) -> None:
    markup = element.evaluate("(el) => el.outerHTML")
    atomic_write_text(output_path, standalone_svg(markup))


def _export_png(page: Any, element: Any, output_path: Path, options: RenderOptions) -> None:
    data = element.screenshot(
        type="png",
        omit_background=options.background == "transparent",
    )
    atomic_write_bytes(output_path, data)


def _export_pdf(page: Any, element: Any, output_path: Path, options: RenderOptions) -> None:
    data = page.pdf(
        print_background=True,
        width=f"{options.width}px",
        height=f"{options.height}px",
        margin={"top": "0px", "right": "0px", "bottom": "0px", "left": "0px"},
    )
    atomic_write_bytes(output_path, data)


_EXPORTERS = {
    OutputFormat.SVG: _export_svg,
    OutputFormat.PNG: _export_png,
    OutputFormat.PDF: _export_pdf,
}


def _exporter_for(fmt: Any) -> Callable[..., None]:
    try:
        return _EXPORTERS[OutputFormat(fmt)]
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported format: {fmt}") from None


def render_diagram(
    diagram: str,
    output_path: Path,
    options: RenderOptions,
    session_factory: SessionFactory | None = None,
) -> None:
    """Render diagram text to ``output_path`` in the requested format.

    Args:
        diagram: Diagram source text
        output_path: Destination file
        options: Effective render options
        session_factory: Provides a browser for the duration of the render
            (default: a fresh headless Chromium)
    """
    session_factory = session_factory or browser_session
    try:
        with session_factory() as browser:
            page = browser.new_page(
                viewport={"width": options.width, "height": options.height},
                device_scale_factor=options.quality,
            )
            page.set_content(build_page(diagram, options))

            _wait_for_svg(page)

            if options.scale != 1.0:
                page.evaluate(SCALE_SCRIPT, options.scale)

            element = page.query_selector(SVG_SELECTOR)
            if element is None:
                raise RenderError("Failed to render diagram. SVG element not found.")

            export = _exporter_for(options.format)
            export(page, element, output_path, options)
    except PlaywrightError as e:
        raise RenderError(str(e)) from e


def render_source(
    source: DiagramSource,
    options: RenderOptions,
    session_factory: SessionFactory | None = None,
) -> RenderResult:
    """Render one loaded diagram, converting failures into a result.

    Args:
        source: Loaded diagram
        options: Effective render options
        session_factory: Provides a browser for the duration of the render

    Returns:
        Render result for the diagram
    """
    output_path = options.output_path_for(source.path)
    logger.debug(f"Converting {source.path} to {output_path}")

    try:
        render_diagram(source.text, output_path, options, session_factory)
    except (RenderError, OSError) as e:
        logger.error(f"Error processing {source.path}: {e}")
        return RenderResult(
            source_path=source.path,
            output_path=output_path,
            error=str(e),
            error_kind=getattr(e, "kind", RenderError.kind),
        )

    logger.info(f"Rendered {source.path} → {output_path}")
    return RenderResult(source_path=source.path, output_path=output_path)


def render_file(
    path: Path,
    options: RenderOptions,
    session_factory: SessionFactory | None = None,
) -> RenderResult | None:
    """Load and render a single diagram file.

    Returns:
        Render result, or None when the file is not a diagram file
    """
    try:
        source = load_diagram(path)
    except OSError as e:
        logger.error(f"Error processing {path}: {e}")
        return RenderResult(
            source_path=path,
            output_path=options.output_path_for(path),
            error=str(e),
            error_kind=RenderError.kind,
        )

    if source is None:
        return None

    return render_source(source, options, session_factory)


def render_all(
    input_path: Path,
    options: RenderOptions,
    session_factory: SessionFactory | None = None,
) -> list[RenderResult]:
    """Render every diagram designated by an input file or directory.

    Args:
        input_path: Diagram file or directory
        options: Effective render options
        session_factory: Provides a browser for each render

    Returns:
        Results of the diagrams that were attempted
    """
    if input_path.is_dir():
        # Each file found in a directory gets its own derived output name.
        options = options.without_filename()

    results: list[RenderResult] = []
    for path in discover(input_path, options.recursive):
        result = render_file(path, options, session_factory)
        if result is not None:
            results.append(result)

    failed = [result for result in results if not result.ok]
    if failed:
        logger.warning(f"{len(failed)} of {len(results)} diagram(s) failed to render")
    logger.info(f"Successfully rendered {len(results) - len(failed)} file(s)")

    return results

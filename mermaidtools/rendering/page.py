"""HTML page shell that hosts the Mermaid renderer."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from ..config.settings import get_settings
from ..core.models import RenderOptions, Theme

TEMPLATE_DIR = Path(__file__).parent / "templates"
PAGE_TEMPLATE = "page.html.j2"


@lru_cache(maxsize=1)
def load_page_template() -> Template:
    """Load the compiled page template."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    return env.get_template(PAGE_TEMPLATE)


def build_page(diagram: str, options: RenderOptions, mermaid_url: str | None = None) -> str:
    """Render the HTML document for one diagram.

    The diagram text is embedded verbatim; Mermaid reads it from the
    ``.mermaid`` container on load.

    Args:
        diagram: Diagram source text
        options: Render options (theme, background, padding)
        mermaid_url: Script URL for Mermaid; defaults to the configured URL

    Returns:
        Complete HTML document
    """
    return load_page_template().render(
        diagram=diagram,
        theme=Theme(options.theme).value,
        background=options.background,
        padding=options.padding,
        mermaid_url=mermaid_url or get_settings().mermaid_url,
    )

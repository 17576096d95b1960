"""CLI argument parsers and validators."""

from __future__ import annotations

import typer

from ..diagrams.templates import DIAGRAM_TEMPLATES, available_templates


def template_listing() -> str:
    return ", ".join(available_templates())


def parse_template_name(value: str | None) -> str | None:
    """Validate a --template value against the built-in templates."""
    if not value:
        return None
    if value not in DIAGRAM_TEMPLATES:
        raise typer.BadParameter(
            f"Template {value!r} not found. Available templates: {template_listing()}"
        )
    return value

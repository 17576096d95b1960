"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import click
import typer
from typer.core import TyperGroup
from typing_extensions import Annotated

from .. import __version__
from ..config.resolver import resolve_options
from ..core.models import DiagramSource
from ..diagrams.templates import TemplateNotFoundError, get_template
from ..rendering import engine
from ..rendering.io import atomic_write_text
from .interactive import run_interactive
from .parsers import parse_template_name, template_listing

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "convert"


class DefaultCommandGroup(TyperGroup):
    """Route invocations without a subcommand name to ``convert``."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        if not args or (args[0] not in self.commands and args[0] not in ("--help", "--version")):
            args.insert(0, DEFAULT_COMMAND)
        return super().parse_args(ctx, args)


app = typer.Typer(
    name="mermaidtools",
    help="Convert .mermaid files to PNG, SVG or PDF.",
    cls=DefaultCommandGroup,
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mermaidtools {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            help="Show the version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert .mermaid files to PNG, SVG or PDF."""


@app.command(DEFAULT_COMMAND)
def convert(
    ctx: typer.Context,
    input_path: Annotated[
        Optional[Path],
        typer.Argument(
            metavar="[INPUT]",
            help="Input .mermaid file or directory.",
            show_default=False,
        ),
    ] = None,
    output_target: Annotated[
        Optional[str],
        typer.Argument(
            metavar="[OUTPUT]",
            help="Output file (overrides format and output directory).",
            show_default=False,
        ),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output directory (default: cwd).", metavar="DIR"),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: pdf, png, svg (default: png)."),
    ] = None,
    theme: Annotated[
        Optional[str],
        typer.Option(
            "--theme", "-t", help="Mermaid theme: default, forest, dark, neutral."
        ),
    ] = None,
    width: Annotated[
        Optional[int],
        typer.Option("--width", "-w", help="Output width in pixels (default: 800)."),
    ] = None,
    height: Annotated[
        Optional[int],
        typer.Option("--height", "-h", help="Output height in pixels (default: 600)."),
    ] = None,
    background: Annotated[
        Optional[str],
        typer.Option(
            "--background", "-b", help="Background CSS color (default: #ffffff)."
        ),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Process directories recursively."),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a JSON config file.", metavar="FILE"),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Run in interactive mode."),
    ] = False,
    padding: Annotated[
        Optional[int],
        typer.Option("--padding", "-p", help="Padding around diagram in pixels (default: 20)."),
    ] = None,
    quality: Annotated[
        Optional[int],
        typer.Option("--quality", "-q", help="Output quality 1-3 (default: 2)."),
    ] = None,
    scale: Annotated[
        Optional[float],
        typer.Option("--scale", "-s", help="Scale factor for the diagram (default: 1.0)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
    template: Annotated[
        Optional[str],
        typer.Option(
            "--template",
            help="Render a predefined template (flowchart, sequence, class, er, gantt, git).",
            callback=parse_template_name,
        ),
    ] = None,
) -> None:
    """Render Mermaid diagrams from a file or directory."""
    _configure_logging(verbose)

    if not interactive and input_path is None and template is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if input_path is not None and not input_path.exists():
        logger.error(f'Input "{input_path}" does not exist')
        raise typer.Exit(code=1)

    cli_args = {
        "output": output_dir,
        "format": output_format,
        "theme": theme,
        "width": width,
        "height": height,
        "background": background,
        "recursive": recursive,
        "padding": padding,
        "quality": quality,
        "scale": scale,
        "verbose": verbose,
    }

    try:
        options = resolve_options(cli_args, config_path=config, output_target=output_target)
        if options.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        if interactive:
            run_interactive(options)
            return

        if input_path is None:
            source = DiagramSource(
                path=Path(f"{template}.mermaid"), text=get_template(template)
            )
            engine.render_source(source, options)
        else:
            engine.render_all(input_path, options)
    except OSError as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(code=1) from e

    logger.debug(
        f"Conversion summary: format={options.format.value} "
        f"theme={options.theme.value} output={options.output.resolve()}"
    )


@app.command("template")
def create_template(
    template_name: Annotated[
        str, typer.Argument(metavar="TEMPLATE", help="Template name.")
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path.", metavar="FILE"),
    ] = Path("./diagram.mermaid"),
) -> None:
    """Create a new diagram from a template."""
    _configure_logging(False)

    try:
        text = get_template(template_name)
    except TemplateNotFoundError:
        logger.error(f'Template "{template_name}" not found')
        logger.info(f"Available templates: {template_listing()}")
        raise typer.Exit(code=1) from None

    try:
        atomic_write_text(output, text)
    except OSError as e:
        logger.error(f"Error creating template: {e}")
        raise typer.Exit(code=1) from e

    logger.info(f'Template "{template_name}" created at {output}')


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

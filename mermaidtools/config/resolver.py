"""Layered resolution of render options.

Priority, lowest first: built-in defaults, JSON config file, explicit
command-line arguments, literal output target.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import ValidationError

from ..core.models import OutputFormat, RenderOptions

logger = logging.getLogger(__name__)

DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "output": Path("."),
        "format": "png",
        "theme": "default",
        "width": 800,
        "height": 600,
        "background": "#ffffff",
        "padding": 20,
        "quality": 2,
        "scale": 1.0,
        "recursive": False,
        "verbose": False,
        "output_filename": None,
    }
)


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load a JSON config file, returning an empty mapping on any problem.

    Args:
        config_path: Path to the JSON config file

    Returns:
        Parsed configuration object
    """
    path = config_path.resolve()
    if not path.exists():
        logger.warning(f"Config file not found: {path}")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Error loading config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Config file {path} must contain a JSON object, ignoring it")
        return {}

    logger.debug(f"Loaded configuration from: {path}")
    return data


def _merge_layer(
    base: dict[str, Any], layer: Mapping[str, Any], source: str
) -> dict[str, Any]:
    """Overlay one source onto ``base`` key by key.

    Invalid values keep the prior value; unknown keys are dropped.
    """
    merged = dict(base)
    for key, value in layer.items():
        if key not in RenderOptions.model_fields:
            logger.debug(f"Ignoring unrecognized option from {source}: {key!r}")
            continue
        try:
            validated = RenderOptions.model_validate({**merged, key: value})
        except ValidationError as e:
            reason = e.errors()[0]["msg"]
            logger.warning(
                f"Invalid {key} {value!r} from {source} ({reason}); "
                f"keeping {merged.get(key)!r}"
            )
            continue
        merged[key] = getattr(validated, key)
    return merged


def parse_output_target(output_target: str) -> dict[str, Any] | None:
    """Split a literal output path into format, directory and file name.

    Returns:
        Option overrides, or None when the extension is not a known format
    """
    target = Path(output_target)
    extension = target.suffix.lower().lstrip(".")
    try:
        fmt = OutputFormat(extension)
    except ValueError:
        return None

    return {
        "format": fmt,
        "output": target.parent,
        "output_filename": target.name,
    }


def ensure_output_dir(options: RenderOptions) -> None:
    """Create the resolved output directory if it does not exist."""
    if not options.output.exists():
        options.output.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Created output directory: {options.output}")


def resolve_options(
    cli_args: Mapping[str, Any],
    config_path: Path | None = None,
    output_target: str | None = None,
    defaults: Mapping[str, Any] = DEFAULTS,
) -> RenderOptions:
    """Build the effective options for one invocation.

    Args:
        cli_args: Values from the command line; None means "not supplied"
        config_path: Optional JSON config file
        output_target: Optional literal output file path
        defaults: Built-in default values

    Returns:
        Validated, immutable render options
    """
    merged = _merge_layer({}, defaults, "defaults")

    if config_path is not None:
        merged = _merge_layer(merged, load_config_file(config_path), "config file")

    supplied = {
        key: value
        for key, value in cli_args.items()
        if value is not None and value is not False
    }
    merged = _merge_layer(merged, supplied, "command line")

    if output_target:
        target = parse_output_target(output_target)
        if target is None:
            logger.warning(
                f'Unsupported output format in "{output_target}". '
                f"Using format: {OutputFormat(merged['format']).value}"
            )
        else:
            merged = _merge_layer(merged, target, "output path")

    options = RenderOptions.model_validate(merged)
    ensure_output_dir(options)

    logger.debug(f"Options: {options.model_dump(mode='json')}")
    return options


def override_options(
    options: RenderOptions, overrides: Mapping[str, Any], source: str
) -> RenderOptions:
    """Apply one more layer of overrides to already resolved options."""
    merged = _merge_layer(options.model_dump(), overrides, source)
    return RenderOptions.model_validate(merged)

"""Domain models for diagram rendering options, sources and results."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutputFormat(str, Enum):
    """Supported export formats; the value doubles as the file extension."""

    PNG = "png"
    SVG = "svg"
    PDF = "pdf"


class Theme(str, Enum):
    """Mermaid themes accepted by the renderer."""

    DEFAULT = "default"
    FOREST = "forest"
    DARK = "dark"
    NEUTRAL = "neutral"


class RenderOptions(BaseModel):
    """Effective options for one invocation (or one interactive session)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    output: Path = Field(default=Path("."), description="Output directory")
    format: OutputFormat = Field(default=OutputFormat.PNG, description="Export format")
    theme: Theme = Field(default=Theme.DEFAULT, description="Mermaid theme")
    width: int = Field(default=800, gt=0, description="Viewport width in pixels")
    height: int = Field(default=600, gt=0, description="Viewport height in pixels")
    background: str = Field(default="#ffffff", min_length=1, description="CSS background")
    padding: int = Field(default=20, ge=0, description="Page padding in pixels")
    quality: int = Field(default=2, ge=1, le=3, description="Device scale factor")
    scale: float = Field(default=1.0, gt=0, description="CSS scale applied to the SVG")
    recursive: bool = Field(default=False, description="Descend into subdirectories")
    verbose: bool = Field(default=False, description="Verbose logging")
    output_filename: str | None = Field(
        default=None, description="Explicit output file name"
    )

    @field_validator("format", "theme", mode="before")
    @classmethod
    def _lowercase_choice(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def without_filename(self) -> RenderOptions:
        """Return a copy that derives output names from each source file."""
        return self.model_copy(update={"output_filename": None})

    def output_path_for(self, source_path: Path) -> Path:
        """Compute where the rendering of ``source_path`` is written."""
        if self.output_filename:
            return self.output / self.output_filename
        extension = OutputFormat(self.format).value
        return self.output / f"{source_path.stem}.{extension}"


class DiagramSource(BaseModel):
    """A diagram file and its normalized text."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Diagram file path")
    text: str = Field(..., description="Diagram source text")


class RenderResult(BaseModel):
    """Outcome of one render attempt."""

    source_path: Path = Field(..., description="Diagram file path")
    output_path: Path = Field(..., description="Output file path")
    error: str | None = Field(default=None, description="Failure message")
    error_kind: str | None = Field(default=None, description="Render classification")

    @property
    def ok(self) -> bool:
        return self.error is None

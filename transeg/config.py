"""Configuration management for the segmentation pipeline."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .document import progress_file_for
from .reader import DEFAULT_CHUNK_SIZE
from .utils.byte_cursor import DEFAULT_ENCODING


class SegmentationConfig(BaseModel):
    """Configuration for reading and segmenting the source."""

    word_limit: int = Field(default=100, ge=1, description="Maximum words per segment")
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, ge=1, description="Bytes read per chunk"
    )
    encoding: str = DEFAULT_ENCODING
    reader_mode: Literal["raw", "normalized"] = Field(
        default="normalized",
        description="Output mode for previews; segmentation always reads raw text",
    )
    max_segments: Optional[int] = Field(
        default=None, ge=1, description="Stop after this many new segments per run"
    )


class OutputConfig(BaseModel):
    """Configuration for output options."""

    progress_file: Optional[Path] = None  # defaults to <input stem>-progress.json
    export_dir: Path = Path("data/exports")


class Config(BaseModel):
    """Main configuration for the segmentation pipeline."""

    input_file: Optional[Path] = None
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_file", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    def resolve_progress_file(self) -> Path:
        """Return the progress file path, deriving it from the input if unset."""
        if self.output.progress_file is not None:
            return self.output.progress_file
        if self.input_file is None:
            raise ValueError("Input file not specified in configuration")
        return progress_file_for(self.input_file)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)

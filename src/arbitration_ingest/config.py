"""Configuration validation models using Pydantic."""
from __future__ import annotations

from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from .workbook_reader import DEFAULT_ALLOWED_EXTENSIONS


class IngestionSettings(BaseModel):
    """Workbook acceptance and source detection settings."""

    allowed_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS),
        description="File extensions accepted for upload",
    )
    sample_rows: int = Field(3, ge=1, le=50, description="Rows inspected for source detection")

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v):
        """Lower-case extensions and ensure the leading dot."""
        if not v:
            raise ValueError("allowed_extensions must not be empty")
        out = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext.startswith("."):
                ext = "." + ext
            out.append(ext)
        return out


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    logs_dir: str = Field("logs", description="Directory for log files")
    file_name: str = Field("ingestion.log", description="Log file name")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return str(v).strip().upper()


class PathSettings(BaseModel):
    output_dir: str = Field("output", description="Directory for ingestion outputs")


class IngestConfig(BaseModel):
    """Complete ingestion configuration."""

    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    paths: PathSettings = Field(default_factory=PathSettings)


def load_and_validate_config(config_dict: dict | None) -> IngestConfig:
    """
    Validate a raw configuration mapping.

    Args:
        config_dict: Parsed YAML mapping; None or empty yields defaults

    Returns:
        Validated IngestConfig object

    Raises:
        ValidationError: If configuration is invalid
    """
    return IngestConfig(**(config_dict or {}))


def load_config(path: str | Path | None) -> IngestConfig:
    """Load a YAML configuration file; a missing path yields the defaults."""

    if path is None or not Path(path).exists():
        return IngestConfig()
    with open(path, "r", encoding="utf-8") as stream:
        return load_and_validate_config(yaml.safe_load(stream))

"""Pydantic models for report configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class DatasetConfig(BaseModel):
    """Options for reading the GenAge table."""

    separator: str | None = Field(
        default=None,
        description="Field separator (None = infer from file suffix)",
    )

    @field_validator("separator")
    @classmethod
    def single_character(cls, v: str | None) -> str | None:
        """Polars only accepts single-byte separators."""
        if v is not None and len(v) != 1:
            raise ValueError(f"separator must be a single character, got {v!r}")
        return v


class CooccurrenceConfig(BaseModel):
    """Selection of records feeding the co-occurrence matrix."""

    max_records: int = Field(
        default=20,
        ge=1,
        description="Use the first N multi-category records in input order",
    )


class HypothesisConfig(BaseModel):
    """Category predicates and threshold for the Welch t-test."""

    group_a: str = Field(
        default="mammal",
        min_length=1,
        description="Substring selecting the first sample from the raw why field",
    )
    group_b: str = Field(
        default="cell",
        min_length=1,
        description="Substring selecting the second sample from the raw why field",
    )
    alpha: float = Field(
        default=0.05,
        gt=0.0,
        lt=1.0,
        description="Significance level used when interpreting the p-value",
    )


class PlotConfig(BaseModel):
    """Figure rendering options."""

    dpi: int = Field(
        default=150,
        ge=50,
        le=600,
        description="Resolution of saved PNG figures",
    )
    top_n: int = Field(
        default=10,
        ge=1,
        description="Number of categories shown in ranking charts",
    )


class ReportConfig(BaseModel):
    """Main report configuration."""

    input_path: Path = Field(
        ...,
        description="Path to the GenAge delimited text file",
    )
    output_dir: Path = Field(
        ...,
        description="Directory receiving tables, figures and the slide report",
    )
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    cooccurrence: CooccurrenceConfig = Field(default_factory=CooccurrenceConfig)
    hypothesis: HypothesisConfig = Field(default_factory=HypothesisConfig)
    plots: PlotConfig = Field(default_factory=PlotConfig)

    @field_validator("output_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        recorded in provenance sidecars to tie outputs to their settings.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()

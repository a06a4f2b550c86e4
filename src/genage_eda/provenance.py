"""Provenance tracking for report reproducibility."""

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from genage_eda.config.schema import ReportConfig


def file_sha256(path: Path) -> str:
    """SHA-256 of a file's contents, read in 64 KiB chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


class ProvenanceTracker:
    """
    Tracks provenance metadata for a report run.

    Records package version, config hash, input file checksum,
    and processing steps so every output can be traced to its inputs.
    """

    def __init__(self, package_version: str, config: ReportConfig):
        """
        Initialize provenance tracker.

        Args:
            package_version: Package version string (e.g., "0.1.0")
            config: ReportConfig instance
        """
        self.package_version = package_version
        self.config_hash = config.config_hash()
        self.input_path = str(config.input_path)
        self.input_sha256 = (
            file_sha256(config.input_path) if config.input_path.is_file() else None
        )
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def create_metadata(self) -> dict:
        """
        Create full provenance metadata dictionary.

        Returns:
            Dictionary with all provenance information
        """
        return {
            "package_version": self.package_version,
            "config_hash": self.config_hash,
            "input_path": self.input_path,
            "input_sha256": self.input_sha256,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance metadata as a JSON sidecar file.

        Args:
            output_path: Path to the main output file.
                         Sidecar will be saved as {stem}.provenance.json

        Returns:
            Path to the sidecar file
        """
        sidecar_path = output_path.with_suffix(".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)

        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: ReportConfig,
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create ProvenanceTracker from a ReportConfig.

        Args:
            config: ReportConfig instance
            version: Package version string. If None, uses genage_eda.__version__
        """
        if version is None:
            from genage_eda import __version__
            version = __version__

        return cls(version, config)

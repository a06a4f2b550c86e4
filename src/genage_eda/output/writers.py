"""Dual-format TSV+Parquet table writer with provenance sidecar."""

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml


def write_table(
    df: pl.DataFrame,
    output_dir: Path,
    filename_base: str,
    description: str = "",
) -> dict:
    """
    Write a result table to TSV and Parquet formats with a YAML sidecar.

    Produces identical data in both formats; row order is kept as given
    since every result table here is already deterministically ordered.

    Args:
        df: Result table (e.g. category frequency, co-occurrence matrix)
        output_dir: Directory to write output files (created if doesn't exist)
        filename_base: Base filename without extension
        description: Free-text description stored in the sidecar

    Returns:
        Dictionary with output file paths:
        {
            "tsv": Path to TSV file,
            "parquet": Path to Parquet file,
            "provenance": Path to YAML provenance sidecar
        }
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tsv_path = output_dir / f"{filename_base}.tsv"
    parquet_path = output_dir / f"{filename_base}.parquet"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    df.write_csv(tsv_path, separator="\t", include_header=True)
    df.write_parquet(parquet_path, compression="snappy", use_pyarrow=True)

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "description": description,
        "output_files": [tsv_path.name, parquet_path.name],
        "row_count": df.height,
        "column_count": len(df.columns),
        "column_names": df.columns,
    }

    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)

    return {
        "tsv": tsv_path,
        "parquet": parquet_path,
        "provenance": provenance_path,
    }

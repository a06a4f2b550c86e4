"""Read the GenAge delimited file into a standardized polars table."""

import warnings
from collections.abc import Iterator
from pathlib import Path

import polars as pl
import structlog

from genage_eda.dataset.models import (
    COLUMN_VARIANTS,
    GENAGE_ID,
    STANDARD_COLUMNS,
    WHY,
    GeneRecord,
)
from genage_eda.errors import DataLoadError, MissingValueWarning

logger = structlog.get_logger()

TAB_SUFFIXES = {".tsv", ".tab", ".txt"}


def infer_separator(path: Path) -> str:
    """Tab for .tsv/.tab/.txt files, comma for everything else."""
    return "\t" if path.suffix.lower() in TAB_SUFFIXES else ","


def resolve_columns(actual_columns: list[str]) -> dict[str, str]:
    """Map header names found in the file onto standardized column names.

    Args:
        actual_columns: Header row of the file

    Returns:
        Mapping {file column -> standardized column}

    Raises:
        DataLoadError: If any standardized column has no matching header
    """
    column_mapping = {}
    missing = []
    for our_name, variants in COLUMN_VARIANTS.items():
        for variant in variants:
            if variant in actual_columns:
                column_mapping[variant] = our_name
                break
        else:
            missing.append(variants[0])

    if missing:
        raise DataLoadError(
            f"Missing required column(s): {', '.join(missing)} "
            f"(found: {', '.join(actual_columns)})"
        )

    return column_mapping


def parse_genage_ids(df: pl.DataFrame) -> pl.DataFrame:
    """Cast the GenAge ID column to Int64, nulling values that do not parse.

    Emits a single MissingValueWarning when any non-empty value fails to
    parse. Values that were already empty are not counted as failures.
    """
    raw = pl.col(GENAGE_ID).str.strip_chars()
    df = df.with_columns(
        raw.alias("_raw_id"),
        raw.cast(pl.Int64, strict=False).alias(GENAGE_ID),
    )

    failed = df.filter(
        pl.col("_raw_id").is_not_null()
        & (pl.col("_raw_id") != "")
        & pl.col(GENAGE_ID).is_null()
    )

    if failed.height > 0:
        examples = failed["_raw_id"].head(5).to_list()
        logger.warning(
            "genage_id_parse_failures",
            failed_count=failed.height,
            examples=examples,
        )
        warnings.warn(
            f"{failed.height} GenAge ID value(s) could not be parsed and were "
            f"set to null (first: {examples})",
            MissingValueWarning,
            stacklevel=3,
        )

    return df.drop("_raw_id")


def load_genage(path: Path | str, separator: str | None = None) -> pl.DataFrame:
    """Load the GenAge table with standardized columns.

    Every column is read as text, then GenAge ID is parsed to Int64.
    Empty "why" cells become the empty string so the column is never null.
    Row order of the file is preserved.

    Args:
        path: Delimited text file with a header row
        separator: Field separator (default: inferred from file suffix)

    Returns:
        DataFrame with columns symbol, name, genage_id (Int64, nullable), why

    Raises:
        DataLoadError: If the file is missing, unreadable, or lacks a
            required column (symbol, name, GenAge.ID, why)
    """
    path = Path(path)

    if not path.is_file():
        raise DataLoadError(f"Dataset file not found: {path}")

    if separator is None:
        separator = infer_separator(path)

    logger.info("genage_load_start", path=str(path), separator=separator)

    try:
        df = pl.read_csv(
            path,
            separator=separator,
            has_header=True,
            infer_schema=False,
            quote_char='"',
        )
    except (OSError, pl.exceptions.PolarsError) as e:
        raise DataLoadError(f"Could not read dataset {path}: {e}") from e

    if not df.columns:
        raise DataLoadError(f"Dataset {path} has no header row")

    column_mapping = resolve_columns(df.columns)

    df = df.select(
        [pl.col(old).alias(new) for old, new in column_mapping.items()]
    ).select(STANDARD_COLUMNS)

    df = df.with_columns(pl.col(WHY).fill_null(""))
    df = parse_genage_ids(df)

    logger.info(
        "genage_load_complete",
        row_count=df.height,
        missing_genage_id=df[GENAGE_ID].null_count(),
        column_mapping=column_mapping,
    )

    return df


def iter_records(df: pl.DataFrame) -> Iterator[GeneRecord]:
    """Yield each table row as a validated GeneRecord."""
    for row in df.select(STANDARD_COLUMNS).iter_rows(named=True):
        yield GeneRecord(
            symbol=row["symbol"] or "",
            name=row["name"] or "",
            genage_id=row[GENAGE_ID],
            why=row[WHY] or "",
        )

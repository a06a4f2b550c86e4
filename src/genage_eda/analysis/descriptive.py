"""Descriptive statistics over the GenAge table."""

import polars as pl
import structlog

from genage_eda.categories.tokenize import CATEGORIES, CATEGORY_COUNT, with_categories
from genage_eda.dataset.models import GENAGE_ID, SYMBOL, WHY

logger = structlog.get_logger()


def has_multiple_categories() -> pl.Expr:
    """Raw "why" contains a literal comma.

    This is a substring test on the field, not on the token count:
    "mammal," qualifies even though it yields a single token.
    """
    return pl.col(WHY).str.contains(",", literal=True)


def total_genes(df: pl.DataFrame) -> int:
    """Number of records."""
    return df.height


def unique_symbols(df: pl.DataFrame) -> int:
    """Number of distinct gene symbols."""
    return df[SYMBOL].n_unique()


def multi_category_count(df: pl.DataFrame) -> int:
    """Number of records whose raw "why" field contains a comma."""
    return df.filter(has_multiple_categories()).height


def multi_category_proportion(df: pl.DataFrame) -> float:
    """Fraction of records with a comma in "why" (0.0 for an empty table)."""
    if df.height == 0:
        return 0.0
    return multi_category_count(df) / df.height


def category_frequency(df: pl.DataFrame) -> pl.DataFrame:
    """
    Count records per exact raw "why" value, most frequent first.

    Groups by the whole field, so "mammal,cell" and "cell,mammal" are
    separate groups. Ties keep the order in which the values were first
    encountered in the table.

    Args:
        df: Standardized GenAge table

    Returns:
        DataFrame with columns why (str) and count (u32), sorted by count DESC
    """
    return (
        df.group_by(WHY, maintain_order=True)
        .agg(pl.len().alias("count"))
        .sort("count", descending=True, maintain_order=True)
    )


def token_frequency(df: pl.DataFrame) -> pl.DataFrame:
    """
    Count records per individual category token, most frequent first.

    A record with "mammal,cell" counts once towards each token. Ties keep
    first-discovery order (rows in input order, tokens left to right).

    Returns:
        DataFrame with columns category (str) and count (u32)
    """
    return (
        with_categories(df)
        .select(pl.col(CATEGORIES).alias("category"))
        .explode("category")
        .drop_nulls("category")
        .group_by("category", maintain_order=True)
        .agg(pl.len().alias("count"))
        .sort("count", descending=True, maintain_order=True)
    )


def category_cardinality(df: pl.DataFrame) -> int:
    """Number of distinct category tokens across all records."""
    return token_frequency(df).height


def most_connected_gene(df: pl.DataFrame) -> str | None:
    """
    Symbol of the multi-category record with the most category tokens.

    Only records whose raw "why" contains a comma are considered. Ties go
    to the record that appears first in the table.

    Returns:
        Gene symbol, or None when no record has a comma in "why"
    """
    ranked = (
        with_categories(df.filter(has_multiple_categories()))
        .sort(CATEGORY_COUNT, descending=True, maintain_order=True)
    )

    if ranked.height == 0:
        logger.info("most_connected_gene_empty", reason="no_multi_category_records")
        return None

    return ranked[SYMBOL][0]


def genage_id_summary(df: pl.DataFrame) -> dict:
    """
    Summary of the numeric GenAge ID column.

    Null ids (values that failed to parse) are counted in `missing` and
    excluded from every other statistic.

    Returns:
        Dict with count, missing, min, max, mean, median
        (numeric entries are None when no id parsed)
    """
    ids = df[GENAGE_ID].drop_nulls()

    if ids.len() == 0:
        return {
            "count": 0,
            "missing": df.height,
            "min": None,
            "max": None,
            "mean": None,
            "median": None,
        }

    return {
        "count": ids.len(),
        "missing": df.height - ids.len(),
        "min": int(ids.min()),
        "max": int(ids.max()),
        "mean": float(ids.mean()),
        "median": float(ids.median()),
    }


def summarize(df: pl.DataFrame, top_n: int = 10) -> dict:
    """
    Compute all descriptive statistics as plain, JSON-serializable values.

    Args:
        df: Standardized GenAge table
        top_n: Number of entries kept from each frequency ranking

    Returns:
        Dict with keys total_genes, unique_symbols, multi_category_count,
        multi_category_proportion, category_cardinality, most_connected_gene,
        top_category, category_frequency, token_frequency, genage_id
    """
    logger.info("descriptive_stats_start", row_count=df.height, top_n=top_n)

    frequency = category_frequency(df)
    tokens = token_frequency(df)

    top_category = frequency.row(0, named=True) if frequency.height > 0 else None

    summary = {
        "total_genes": total_genes(df),
        "unique_symbols": unique_symbols(df),
        "multi_category_count": multi_category_count(df),
        "multi_category_proportion": multi_category_proportion(df),
        "category_cardinality": tokens.height,
        "most_connected_gene": most_connected_gene(df),
        "top_category": top_category,
        "category_frequency": frequency.head(top_n).to_dicts(),
        "token_frequency": tokens.head(top_n).to_dicts(),
        "genage_id": genage_id_summary(df),
    }

    logger.info(
        "descriptive_stats_complete",
        total_genes=summary["total_genes"],
        unique_symbols=summary["unique_symbols"],
        multi_category_count=summary["multi_category_count"],
        category_cardinality=summary["category_cardinality"],
        most_connected_gene=summary["most_connected_gene"],
    )

    return summary

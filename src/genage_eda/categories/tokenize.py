"""Split the multi-valued "why" field into category tokens."""

import polars as pl

from genage_eda.dataset.models import WHY

CATEGORY_SEPARATOR = ","
CATEGORIES = "categories"
CATEGORY_COUNT = "category_count"


def tokenize_ordered(why: str | None) -> list[str]:
    """Category tokens in order of first appearance, duplicates removed.

    Splits on commas, strips surrounding whitespace and discards empty
    pieces. This order is the discovery order used for co-occurrence labels.

    Examples:
        >>> tokenize_ordered("mammal, cell ,mammal")
        ['mammal', 'cell']
        >>> tokenize_ordered("")
        []
    """
    if not why:
        return []

    tokens: list[str] = []
    for piece in why.split(CATEGORY_SEPARATOR):
        token = piece.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def tokenize(why: str | None) -> frozenset[str]:
    """Set of category tokens in a raw "why" value."""
    return frozenset(tokenize_ordered(why))


def category_tokens_expr(column: str = WHY) -> pl.Expr:
    """Polars expression equivalent to tokenize_ordered() on a string column."""
    return (
        pl.col(column)
        .fill_null("")
        .str.split(CATEGORY_SEPARATOR)
        .list.eval(pl.element().str.strip_chars())
        .list.eval(pl.element().filter(pl.element() != ""))
        .list.unique(maintain_order=True)
    )


def with_categories(df: pl.DataFrame) -> pl.DataFrame:
    """Add `categories` (ordered token list) and `category_count` columns."""
    return df.with_columns(
        category_tokens_expr().alias(CATEGORIES)
    ).with_columns(
        pl.col(CATEGORIES).list.len().cast(pl.Int64).alias(CATEGORY_COUNT)
    )

"""Category tokenization of the GenAge "why" field."""

from genage_eda.categories.tokenize import (
    CATEGORIES,
    CATEGORY_COUNT,
    category_tokens_expr,
    tokenize,
    tokenize_ordered,
    with_categories,
)

__all__ = [
    "CATEGORIES",
    "CATEGORY_COUNT",
    "category_tokens_expr",
    "tokenize",
    "tokenize_ordered",
    "with_categories",
]

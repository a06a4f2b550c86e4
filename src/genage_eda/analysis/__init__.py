"""Descriptive statistics, category co-occurrence and hypothesis testing."""

from genage_eda.analysis.descriptive import (
    category_cardinality,
    category_frequency,
    genage_id_summary,
    most_connected_gene,
    multi_category_count,
    multi_category_proportion,
    summarize,
    token_frequency,
    total_genes,
    unique_symbols,
)
from genage_eda.analysis.cooccurrence import (
    CooccurrenceMatrix,
    build_cooccurrence_matrix,
    cooccurrence_from_table,
    select_multi_category,
)
from genage_eda.analysis.hypothesis import (
    WelchTestResult,
    extract_samples,
    run_hypothesis_test,
    welch_t_test,
)

__all__ = [
    "total_genes",
    "unique_symbols",
    "multi_category_count",
    "multi_category_proportion",
    "category_frequency",
    "token_frequency",
    "category_cardinality",
    "most_connected_gene",
    "genage_id_summary",
    "summarize",
    "CooccurrenceMatrix",
    "build_cooccurrence_matrix",
    "cooccurrence_from_table",
    "select_multi_category",
    "WelchTestResult",
    "extract_samples",
    "run_hypothesis_test",
    "welch_t_test",
]

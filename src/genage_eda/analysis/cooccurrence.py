"""Category co-occurrence matrix for multi-category GenAge records."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import polars as pl
import structlog

from genage_eda.analysis.descriptive import has_multiple_categories
from genage_eda.categories.tokenize import tokenize_ordered
from genage_eda.dataset.models import SYMBOL, WHY

logger = structlog.get_logger()


@dataclass(frozen=True)
class CooccurrenceMatrix:
    """Symmetric count matrix of category pairs.

    Attributes:
        labels: Category tokens in discovery order (row and column labels)
        counts: Square int64 array; counts[i, j] is the number of records
                whose category set holds both labels[i] and labels[j].
                The diagonal is always zero.
    """

    labels: tuple[str, ...]
    counts: np.ndarray

    @property
    def size(self) -> int:
        return len(self.labels)

    def count(self, first: str, second: str) -> int:
        """Co-occurrence count for two labels."""
        i = self.labels.index(first)
        j = self.labels.index(second)
        return int(self.counts[i, j])

    @property
    def label_column(self) -> str:
        """Row-label column name for to_frame(), distinct from every label."""
        name = "category"
        while name in self.labels:
            name = f"_{name}"
        return name

    def to_frame(self) -> pl.DataFrame:
        """Matrix as a polars table: a label column, then one per label."""
        label_column = self.label_column
        data = {label_column: list(self.labels)}
        for j, label in enumerate(self.labels):
            data[label] = self.counts[:, j].tolist()
        return pl.DataFrame(
            data,
            schema={label_column: pl.Utf8, **{label: pl.Int64 for label in self.labels}},
        )

    def top_pairs(self, n: int | None = None) -> list[dict]:
        """
        Unordered category pairs with a non-zero count, most frequent first.

        Ties keep label order (row index, then column index).

        Args:
            n: Maximum number of pairs to return (None = all)

        Returns:
            List of {"first", "second", "count"} dicts
        """
        pairs = []
        for i in range(self.size):
            for j in range(i + 1, self.size):
                value = int(self.counts[i, j])
                if value > 0:
                    pairs.append({
                        "first": self.labels[i],
                        "second": self.labels[j],
                        "count": value,
                    })

        pairs.sort(key=lambda pair: pair["count"], reverse=True)
        return pairs if n is None else pairs[:n]

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "counts": self.counts.tolist(),
        }


def select_multi_category(
    df: pl.DataFrame,
    max_records: int | None = None,
) -> pl.DataFrame:
    """
    Records with a comma in "why", in input order.

    The matrix depends on which records are chosen, so the rule is explicit:
    keep the first `max_records` qualifying rows as they appear in the file.

    Args:
        df: Standardized GenAge table
        max_records: Keep at most this many records (None = all qualifying)

    Returns:
        Filtered DataFrame preserving input row order

    Raises:
        ValueError: If max_records is less than 1
    """
    if max_records is not None and max_records < 1:
        raise ValueError(f"max_records must be >= 1, got {max_records}")

    subset = df.filter(has_multiple_categories())
    if max_records is not None:
        subset = subset.head(max_records)
    return subset


def build_cooccurrence_matrix(
    token_lists: Iterable[Sequence[str]],
) -> CooccurrenceMatrix:
    """
    Count how often each pair of categories appears in the same record.

    Vocabulary order is first appearance: records in the given order,
    tokens left to right within a record. For every record, each ordered
    pair of distinct tokens (j, k) increments counts[j, k], so a record with
    k distinct tokens adds k*(k-1) to the matrix total.

    Args:
        token_lists: Category tokens per record, in record order

    Returns:
        CooccurrenceMatrix (empty when no tokens are present)
    """
    records = [list(dict.fromkeys(tokens)) for tokens in token_lists]

    index: dict[str, int] = {}
    for tokens in records:
        for token in tokens:
            if token not in index:
                index[token] = len(index)

    counts = np.zeros((len(index), len(index)), dtype=np.int64)

    for tokens in records:
        positions = [index[token] for token in tokens]
        for j in positions:
            for k in positions:
                if j != k:
                    counts[j, k] += 1

    return CooccurrenceMatrix(labels=tuple(index), counts=counts)


def cooccurrence_from_table(
    df: pl.DataFrame,
    max_records: int | None = None,
) -> CooccurrenceMatrix:
    """
    Full co-occurrence computation from the GenAge table.

    Composes: select_multi_category -> tokenize_ordered -> build matrix

    Args:
        df: Standardized GenAge table
        max_records: First N multi-category records to include (None = all)

    Returns:
        CooccurrenceMatrix over the selected records
    """
    subset = select_multi_category(df, max_records=max_records)

    logger.info(
        "cooccurrence_build_start",
        max_records=max_records,
        selected=subset.height,
        symbols=subset[SYMBOL].head(5).to_list(),
    )

    matrix = build_cooccurrence_matrix(
        tokenize_ordered(why) for why in subset[WHY].to_list()
    )

    logger.info(
        "cooccurrence_build_complete",
        vocabulary_size=matrix.size,
        total_increments=int(matrix.counts.sum()),
    )

    return matrix

"""Unit tests for descriptive statistics."""

import json

import polars as pl
import pytest

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


def make_table(whys, symbols=None, ids=None) -> pl.DataFrame:
    n = len(whys)
    return pl.DataFrame(
        {
            "symbol": symbols or [f"GENE{i}" for i in range(1, n + 1)],
            "name": [f"gene {i}" for i in range(1, n + 1)],
            "genage_id": ids if ids is not None else list(range(1, n + 1)),
            "why": whys,
        },
        schema={"symbol": pl.Utf8, "name": pl.Utf8, "genage_id": pl.Int64, "why": pl.Utf8},
    )


@pytest.fixture
def five_genes() -> pl.DataFrame:
    """Five-row scenario: one multi-category record, "mammal" three times."""
    return make_table(["mammal", "cell", "mammal,cell", "model", "mammal"])


def test_end_to_end_scenario(five_genes):
    """Raw grouping ranks "mammal" first; counting tokens gives it 3."""
    assert total_genes(five_genes) == 5
    assert multi_category_count(five_genes) == 1
    assert category_frequency(five_genes)["why"][0] == "mammal"
    assert token_frequency(five_genes).row(0) == ("mammal", 3)


def test_top_category_counts_raw_values(five_genes):
    """Raw grouping keeps "mammal,cell" apart from "mammal"."""
    frequency = category_frequency(five_genes)

    assert frequency.row(0) == ("mammal", 2)
    assert dict(frequency.iter_rows()) == {
        "mammal": 2,
        "cell": 1,
        "mammal,cell": 1,
        "model": 1,
    }


def test_token_frequency_counts_each_token():
    df = make_table(["mammal", "cell", "mammal,cell", "model", "mammal"])

    tokens = token_frequency(df)

    assert tokens.row(0) == ("mammal", 3)
    assert dict(tokens.iter_rows()) == {"mammal": 3, "cell": 2, "model": 1}


def test_top_category_three_mammals():
    df = make_table(["mammal", "cell", "mammal", "model", "mammal"])

    assert category_frequency(df).row(0) == ("mammal", 3)


def test_category_frequency_stable_ties():
    """Values tied at count 3 rank in first-encountered order."""
    whys = ["cell", "model", "mammal", "model", "cell", "mammal", "mammal", "cell", "model", "human"]
    df = make_table(whys)

    frequency = category_frequency(df)

    assert frequency["why"].to_list() == ["cell", "model", "mammal", "human"]
    assert frequency["count"].to_list() == [3, 3, 3, 1]


def test_category_frequency_sorted_descending():
    df = make_table(["a", "b", "b", "c", "c", "c"])

    counts = category_frequency(df)["count"].to_list()

    assert counts == sorted(counts, reverse=True)


def test_unique_symbols_not_above_total():
    df = make_table(["a", "b", "c"], symbols=["GHR", "GHR", "TP53"])

    assert unique_symbols(df) == 2
    assert unique_symbols(df) <= total_genes(df)


def test_multi_category_is_substring_test():
    """A trailing comma counts even though it yields one token."""
    df = make_table(["mammal,", "cell", "a,b"])

    assert multi_category_count(df) == 2


def test_multi_category_proportion():
    df = make_table(["a,b", "c", "d", "e,f"])

    assert multi_category_proportion(df) == 0.5
    assert multi_category_proportion(make_table([])) == 0.0


def test_most_connected_gene_picks_largest_token_set():
    df = make_table(
        ["mammal,cell", "human,cell,functional", "mammal", "a,b,c"],
        symbols=["IGF1R", "WRN", "GHR", "LATE"],
    )

    # WRN and LATE both have 3 tokens; WRN appears first
    assert most_connected_gene(df) == "WRN"


def test_most_connected_gene_ignores_records_without_comma():
    df = make_table(["a,b", "x"], symbols=["PAIR", "SINGLE"])

    assert most_connected_gene(df) == "PAIR"


def test_most_connected_gene_empty_selection():
    """No multi-category record yields None rather than an exception."""
    df = make_table(["mammal", "cell"])

    assert most_connected_gene(df) is None
    assert most_connected_gene(make_table([])) is None


def test_category_cardinality():
    df = make_table(["mammal,cell", "cell", " model ", ""])

    assert category_cardinality(df) == 3


def test_genage_id_summary_skips_nulls():
    df = make_table(["a", "b", "c", "d"], ids=[10, None, 30, 20])

    summary = genage_id_summary(df)

    assert summary == {
        "count": 3,
        "missing": 1,
        "min": 10,
        "max": 30,
        "mean": 20.0,
        "median": 20.0,
    }


def test_genage_id_summary_all_missing():
    df = make_table(["a"], ids=[None])

    summary = genage_id_summary(df)

    assert summary["count"] == 0
    assert summary["missing"] == 1
    assert summary["mean"] is None


def test_summarize_is_json_serializable(five_genes):
    summary = summarize(five_genes, top_n=2)

    assert summary["total_genes"] == 5
    assert summary["unique_symbols"] == 5
    assert summary["multi_category_count"] == 1
    assert summary["multi_category_proportion"] == 0.2
    assert summary["category_cardinality"] == 3
    assert summary["most_connected_gene"] == "GENE3"
    assert summary["top_category"] == {"why": "mammal", "count": 2}
    assert len(summary["category_frequency"]) == 2
    json.dumps(summary)


def test_summarize_empty_table():
    summary = summarize(make_table([]))

    assert summary["total_genes"] == 0
    assert summary["top_category"] is None
    assert summary["most_connected_gene"] is None


def test_inputs_not_mutated(five_genes):
    before = five_genes.clone()

    summarize(five_genes)

    assert five_genes.equals(before)

"""Unit tests for the Welch two-sample t-test."""

import json
import math

import polars as pl
import pytest
from scipy import stats

from genage_eda.analysis.hypothesis import (
    WelchTestResult,
    extract_samples,
    run_hypothesis_test,
    welch_t_test,
)
from genage_eda.errors import InsufficientSampleError


@pytest.fixture
def genes() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "symbol": ["GHR", "IGF1R", "TP53", "WRN", "LMNA", "KL", "ATM", "BLM"],
            "name": ["a", "b", "c", "d", "e", "f", "g", "h"],
            "genage_id": [1, 4, 8, 9, None, 15, 19, 20],
            "why": [
                "mammal",
                "mammal,cell",
                "mammal,cell,functional",
                "human,cell",
                "human,cell",
                "mammal",
                "cell",
                "human,cell",
            ],
        },
        schema={"symbol": pl.Utf8, "name": pl.Utf8, "genage_id": pl.Int64, "why": pl.Utf8},
    )


def test_reference_samples():
    """Equal sizes and variances: df is exactly n1 + n2 - 2."""
    result = welch_t_test([10, 12, 14], [20, 22, 24])

    assert result.mean_a == 12.0
    assert result.mean_b == 22.0
    assert result.statistic < 0
    assert result.degrees_of_freedom == pytest.approx(4.0)
    assert result.statistic == pytest.approx(-10 / math.sqrt(8 / 3))


def test_matches_scipy_welch():
    a = [3.1, 4.7, 5.0, 2.2, 8.9, 6.4]
    b = [10.5, 7.7, 12.1, 9.9]

    result = welch_t_test(a, b)
    expected = stats.ttest_ind(a, b, equal_var=False)

    assert result.statistic == pytest.approx(expected.statistic)
    assert result.p_value == pytest.approx(expected.pvalue)


def test_fractional_degrees_of_freedom():
    result = welch_t_test([1, 2, 3, 4, 50], [10, 11, 12])

    assert result.degrees_of_freedom != int(result.degrees_of_freedom)
    assert 2 <= result.degrees_of_freedom <= 6


def test_p_value_two_sided():
    forward = welch_t_test([1, 2, 3, 4], [3, 5, 7, 9])
    reverse = welch_t_test([3, 5, 7, 9], [1, 2, 3, 4])

    assert forward.statistic == pytest.approx(-reverse.statistic)
    assert forward.p_value == pytest.approx(reverse.p_value)
    assert 0.0 < forward.p_value <= 1.0


def test_identical_means_p_value_one():
    result = welch_t_test([1, 2, 3], [0, 2, 4])

    assert result.statistic == pytest.approx(0.0)
    assert result.p_value == pytest.approx(1.0)


@pytest.mark.parametrize("sample_a, sample_b, label", [
    ([], [1, 2], "a"),
    ([5], [1, 2], "a"),
    ([1, 2], [7], "b"),
])
def test_insufficient_sample(sample_a, sample_b, label):
    with pytest.raises(InsufficientSampleError) as exc_info:
        welch_t_test(sample_a, sample_b)

    assert exc_info.value.label == label
    assert exc_info.value.size < 2


def test_zero_variance_is_nan():
    result = welch_t_test([5, 5, 5], [5, 5])

    assert math.isnan(result.statistic)
    assert math.isnan(result.p_value)
    assert not result.is_significant()
    assert "zero variance" in result.interpretation()


def reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


def test_zero_variance_to_dict_is_strict_json():
    result = welch_t_test([5, 5, 5], [6, 6], "mammal", "cell")

    data = json.loads(json.dumps(result.to_dict()), parse_constant=reject_constant)

    assert data["statistic"] is None
    assert data["degrees_of_freedom"] is None
    assert data["p_value"] is None
    assert data["mean_a"] == 5.0
    assert data["mean_b"] == 6.0


def test_extract_samples_non_exclusive(genes):
    """Records matching both substrings land in both samples."""
    mammal, cell = extract_samples(genes, "mammal", "cell")

    assert mammal == [1.0, 4.0, 8.0, 15.0]
    # LMNA has no GenAge ID and is left out
    assert cell == [4.0, 8.0, 9.0, 19.0, 20.0]


def test_extract_samples_is_substring_match(genes):
    """Matching runs on the raw field, not on whole tokens."""
    sample, _ = extract_samples(genes, "man", "cell")

    assert sample == [9.0, 20.0]


def test_run_hypothesis_test(genes):
    result = run_hypothesis_test(genes, "mammal", "cell")

    assert isinstance(result, WelchTestResult)
    assert result.label_a == "mammal"
    assert result.label_b == "cell"
    assert result.n_a == 4
    assert result.n_b == 5
    assert result.mean_a == pytest.approx(7.0)
    assert result.mean_b == pytest.approx(12.0)


def test_run_hypothesis_test_unmatched_pattern(genes):
    with pytest.raises(InsufficientSampleError) as exc_info:
        run_hypothesis_test(genes, "mammal", "upstream")

    assert exc_info.value.label == "upstream"
    assert exc_info.value.size == 0


def test_single_match_is_insufficient(genes):
    with pytest.raises(InsufficientSampleError):
        run_hypothesis_test(genes, "functional", "cell")


def test_significance_and_interpretation():
    result = welch_t_test([1, 2, 3, 2, 1], [20, 21, 22, 21, 20], "mammal", "cell")

    assert result.is_significant(0.05)
    assert "significantly lower" in result.interpretation(0.05)
    assert not result.is_significant(1e-12)
    assert "No significant difference" in result.interpretation(1e-12)


def test_to_dict_round_trip_fields():
    result = welch_t_test([10, 12, 14], [20, 22, 24], "mammal", "cell")

    data = result.to_dict()

    assert set(data) == {
        "statistic", "degrees_of_freedom", "p_value",
        "mean_a", "mean_b", "n_a", "n_b", "label_a", "label_b",
    }
    assert WelchTestResult(**data) == result

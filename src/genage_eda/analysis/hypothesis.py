"""Welch two-sample t-test of GenAge IDs between two category groups."""

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass

import numpy as np
import polars as pl
import structlog
from scipy import stats

from genage_eda.dataset.models import GENAGE_ID, WHY
from genage_eda.errors import InsufficientSampleError

logger = structlog.get_logger()

MIN_SAMPLE_SIZE = 2


@dataclass(frozen=True)
class WelchTestResult:
    """Outcome of a two-sided Welch t-test.

    Attributes:
        statistic: t statistic (negative when mean_a < mean_b)
        degrees_of_freedom: Welch-Satterthwaite degrees of freedom (fractional)
        p_value: Two-sided p-value from the Student t survival function
        mean_a, mean_b: Sample means
        n_a, n_b: Sample sizes
        label_a, label_b: Names of the two samples
    """

    statistic: float
    degrees_of_freedom: float
    p_value: float
    mean_a: float
    mean_b: float
    n_a: int
    n_b: int
    label_a: str = "a"
    label_b: str = "b"

    def is_significant(self, alpha: float = 0.05) -> bool:
        """True when p_value < alpha. NaN p-values are never significant."""
        return not math.isnan(self.p_value) and self.p_value < alpha

    def interpretation(self, alpha: float = 0.05) -> str:
        """One-sentence reading of the result at the given alpha."""
        if math.isnan(self.p_value):
            return (
                f"Test undefined: both '{self.label_a}' and '{self.label_b}' "
                f"samples have zero variance"
            )
        if self.is_significant(alpha):
            direction = "lower" if self.mean_a < self.mean_b else "higher"
            return (
                f"Mean GenAge ID of '{self.label_a}' genes ({self.mean_a:.1f}) is "
                f"significantly {direction} than '{self.label_b}' genes "
                f"({self.mean_b:.1f}); p = {self.p_value:.3g} < {alpha}"
            )
        return (
            f"No significant difference in mean GenAge ID between "
            f"'{self.label_a}' ({self.mean_a:.1f}) and '{self.label_b}' "
            f"({self.mean_b:.1f}) genes; p = {self.p_value:.3g} >= {alpha}"
        )

    def to_dict(self) -> dict:
        """Plain values for JSON output; undefined (NaN/inf) floats become None."""
        return {
            key: None if isinstance(value, float) and not math.isfinite(value) else value
            for key, value in asdict(self).items()
        }


def extract_samples(
    df: pl.DataFrame,
    pattern_a: str = "mammal",
    pattern_b: str = "cell",
) -> tuple[list[float], list[float]]:
    """
    GenAge IDs of records whose raw "why" contains each pattern.

    Matching is a literal substring test on the raw field, so the groups
    may overlap: "mammal,cell" contributes to both samples. Records with a
    null GenAge ID are left out.

    Args:
        df: Standardized GenAge table
        pattern_a: Substring selecting the first sample
        pattern_b: Substring selecting the second sample

    Returns:
        Tuple (sample_a, sample_b) of float lists in input order
    """
    def sample(pattern: str) -> list[float]:
        return (
            df.filter(pl.col(WHY).str.contains(pattern, literal=True))
            .get_column(GENAGE_ID)
            .drop_nulls()
            .cast(pl.Float64)
            .to_list()
        )

    return sample(pattern_a), sample(pattern_b)


def welch_t_test(
    sample_a: Sequence[float],
    sample_b: Sequence[float],
    label_a: str = "a",
    label_b: str = "b",
) -> WelchTestResult:
    """
    Two-sided Welch (unequal variance) t-test.

    t  = (mean_a - mean_b) / sqrt(var_a/n_a + var_b/n_b)
    df = (var_a/n_a + var_b/n_b)^2 /
         ((var_a/n_a)^2/(n_a-1) + (var_b/n_b)^2/(n_b-1))
    p  = 2 * t_sf(|t|, df)

    Variances use n-1 in the denominator. When both samples have zero
    variance the statistic, degrees of freedom and p-value are NaN.

    Args:
        sample_a: First sample
        sample_b: Second sample
        label_a: Name of the first sample, used in errors and reporting
        label_b: Name of the second sample

    Returns:
        WelchTestResult

    Raises:
        InsufficientSampleError: If either sample has fewer than 2 values
    """
    a = np.asarray(sample_a, dtype=np.float64)
    b = np.asarray(sample_b, dtype=np.float64)

    if a.size < MIN_SAMPLE_SIZE:
        raise InsufficientSampleError(label_a, int(a.size), MIN_SAMPLE_SIZE)
    if b.size < MIN_SAMPLE_SIZE:
        raise InsufficientSampleError(label_b, int(b.size), MIN_SAMPLE_SIZE)

    n_a, n_b = a.size, b.size
    mean_a, mean_b = float(a.mean()), float(b.mean())
    se2_a = float(a.var(ddof=1)) / n_a
    se2_b = float(b.var(ddof=1)) / n_b
    se2 = se2_a + se2_b

    if se2 == 0.0:
        logger.warning(
            "welch_zero_variance",
            label_a=label_a,
            label_b=label_b,
            mean_a=mean_a,
            mean_b=mean_b,
        )
        statistic = dof = p_value = math.nan
    else:
        statistic = (mean_a - mean_b) / math.sqrt(se2)
        dof = se2 ** 2 / (se2_a ** 2 / (n_a - 1) + se2_b ** 2 / (n_b - 1))
        p_value = float(2.0 * stats.t.sf(abs(statistic), dof))

    result = WelchTestResult(
        statistic=statistic,
        degrees_of_freedom=dof,
        p_value=p_value,
        mean_a=mean_a,
        mean_b=mean_b,
        n_a=int(n_a),
        n_b=int(n_b),
        label_a=label_a,
        label_b=label_b,
    )

    logger.info(
        "welch_t_test_complete",
        label_a=label_a,
        label_b=label_b,
        n_a=result.n_a,
        n_b=result.n_b,
        statistic=result.statistic,
        degrees_of_freedom=result.degrees_of_freedom,
        p_value=result.p_value,
    )

    return result


def run_hypothesis_test(
    df: pl.DataFrame,
    pattern_a: str = "mammal",
    pattern_b: str = "cell",
) -> WelchTestResult:
    """
    Compare GenAge IDs of two category groups with a Welch t-test.

    Composes: extract_samples -> welch_t_test

    Raises:
        InsufficientSampleError: If either group has fewer than 2 parsed ids
    """
    sample_a, sample_b = extract_samples(df, pattern_a, pattern_b)

    logger.info(
        "hypothesis_samples_extracted",
        pattern_a=pattern_a,
        pattern_b=pattern_b,
        n_a=len(sample_a),
        n_b=len(sample_b),
    )

    return welch_t_test(sample_a, sample_b, label_a=pattern_a, label_b=pattern_b)

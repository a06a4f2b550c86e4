"""Figure generation for the GenAge exploratory report."""

import logging
from pathlib import Path

import matplotlib
import polars as pl

# Use Agg backend (non-interactive, safe for headless/CLI use)
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402

from genage_eda.analysis.cooccurrence import CooccurrenceMatrix  # noqa: E402
from genage_eda.analysis.descriptive import category_frequency  # noqa: E402
from genage_eda.categories.tokenize import (  # noqa: E402
    CATEGORIES,
    CATEGORY_COUNT,
    with_categories,
)
from genage_eda.dataset.models import GENAGE_ID, SYMBOL  # noqa: E402

logger = logging.getLogger(__name__)

NO_CATEGORY = "(none)"


def _save(fig, output_path: Path, dpi: int) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return output_path


def _bin_ids(values: pd.Series, n_bins: int) -> pd.Series:
    """Equal-width bins labelled as integer ranges like "1-50"."""
    binned = pd.cut(values, bins=n_bins, include_lowest=True)
    labels = [
        f"{int(interval.left) + 1}-{int(interval.right)}"
        for interval in binned.cat.categories
    ]
    if len(set(labels)) != len(labels):
        return binned.astype(str)
    return binned.cat.rename_categories(labels)


def _with_primary_category(df: pl.DataFrame) -> pl.DataFrame:
    """Add `primary_category`: first token of "why", or "(none)"."""
    return with_categories(df).with_columns(
        pl.col(CATEGORIES).list.first().fill_null(NO_CATEGORY).alias("primary_category")
    )


def plot_category_frequency(
    df: pl.DataFrame,
    output_path: Path,
    top_n: int = 10,
    dpi: int = 150,
) -> Path:
    """
    Horizontal bar chart of the most common raw "why" values.

    Args:
        df: Standardized GenAge table
        output_path: Path where PNG will be saved
        top_n: Number of bars
        dpi: Output resolution

    Returns:
        Path to the saved PNG file
    """
    frequency = category_frequency(df).head(top_n)
    labels = [why if why else NO_CATEGORY for why in frequency["why"].to_list()]
    counts = frequency["count"].to_list()

    sns.set_theme(style="whitegrid", context="paper")
    fig, ax = plt.subplots(figsize=(10, max(3, 0.45 * len(labels) + 1)))

    sns.barplot(x=counts, y=labels, hue=labels, palette="viridis", ax=ax, legend=False)

    ax.set_xlabel("Genes")
    ax.set_ylabel("Reason for inclusion")
    ax.set_title(f"Top {len(labels)} Reasons for Inclusion")

    _save(fig, output_path, dpi)
    logger.info(f"Saved category frequency plot to {output_path}")
    return output_path


def plot_cooccurrence_heatmap(
    matrix: CooccurrenceMatrix,
    output_path: Path,
    dpi: int = 150,
) -> Path:
    """
    Annotated heatmap of category pair counts.

    Args:
        matrix: Co-occurrence matrix
        output_path: Path where PNG will be saved
        dpi: Output resolution

    Returns:
        Path to the saved PNG file

    Raises:
        ValueError: If the matrix has no categories
    """
    if matrix.size == 0:
        raise ValueError("Co-occurrence matrix is empty; nothing to plot")

    side = max(4, 0.8 * matrix.size + 2)
    fig, ax = plt.subplots(figsize=(side, side))

    sns.heatmap(
        matrix.counts,
        xticklabels=matrix.labels,
        yticklabels=matrix.labels,
        annot=True,
        fmt="d",
        cmap="Blues",
        square=True,
        cbar_kws={"label": "Co-occurring genes"},
        ax=ax,
    )

    plt.setp(ax.get_xticklabels(), rotation=45, ha="right")
    ax.set_title("Category Co-occurrence")

    _save(fig, output_path, dpi)
    logger.info(f"Saved co-occurrence heatmap to {output_path}")
    return output_path


def plot_category_tiles(
    subset: pl.DataFrame,
    output_path: Path,
    dpi: int = 150,
) -> Path:
    """
    Tile plot of gene-by-category membership.

    One row per gene in `subset` (input order), one column per category in
    discovery order; a filled tile means the gene lists that category.

    Raises:
        ValueError: If the subset is empty
    """
    if subset.height == 0:
        raise ValueError("No genes to plot")

    tokenized = with_categories(subset)
    token_lists = tokenized[CATEGORIES].to_list()
    symbols = tokenized[SYMBOL].to_list()

    columns: list[str] = []
    for tokens in token_lists:
        for token in tokens:
            if token not in columns:
                columns.append(token)

    membership = [
        [1 if column in tokens else 0 for column in columns]
        for tokens in token_lists
    ]

    fig, ax = plt.subplots(figsize=(max(4, 0.7 * len(columns) + 2), max(3, 0.35 * len(symbols) + 1)))

    sns.heatmap(
        membership,
        xticklabels=columns,
        yticklabels=symbols,
        cmap=sns.color_palette(["#f0f0f0", "#2c7fb8"], as_cmap=True),
        cbar=False,
        linewidths=0.5,
        linecolor="white",
        vmin=0,
        vmax=1,
        ax=ax,
    )

    plt.setp(ax.get_xticklabels(), rotation=45, ha="right")
    ax.set_xlabel("Category")
    ax.set_ylabel("Gene")
    ax.set_title("Category Membership of Multi-category Genes")

    _save(fig, output_path, dpi)
    logger.info(f"Saved category tile plot to {output_path}")
    return output_path


def plot_genage_id_tiles(
    df: pl.DataFrame,
    output_path: Path,
    bins: int = 10,
    dpi: int = 150,
) -> Path:
    """
    Tile plot of gene counts by GenAge ID range and primary category.

    Records with a null GenAge ID are left out.

    Raises:
        ValueError: If no record has a GenAge ID
    """
    data = _with_primary_category(df).filter(pl.col(GENAGE_ID).is_not_null())
    if data.height == 0:
        raise ValueError("No GenAge IDs to plot")

    pdf = data.select(GENAGE_ID, "primary_category").to_pandas()
    n_bins = max(1, min(bins, pdf[GENAGE_ID].nunique()))
    pdf["id_range"] = _bin_ids(pdf[GENAGE_ID], n_bins)

    table = (
        pdf.groupby(["primary_category", "id_range"], observed=False)
        .size()
        .unstack(fill_value=0)
    )

    fig, ax = plt.subplots(figsize=(12, max(3, 0.5 * len(table.index) + 1)))

    sns.heatmap(table, annot=True, fmt="d", cmap="YlGnBu", cbar=False, ax=ax)

    plt.setp(ax.get_xticklabels(), rotation=45, ha="right")
    ax.set_xlabel("GenAge ID range")
    ax.set_ylabel("Primary category")
    ax.set_title("Genes by GenAge ID Range and Primary Category")

    _save(fig, output_path, dpi)
    logger.info(f"Saved GenAge ID tile plot to {output_path}")
    return output_path


def plot_3d_scatter(
    df: pl.DataFrame,
    output_path: Path,
    dpi: int = 150,
) -> Path:
    """
    3D scatter of GenAge ID, category count and primary category.

    The z axis encodes the primary category as its index in order of
    first appearance. Records with a null GenAge ID are left out.

    Raises:
        ValueError: If no record has a GenAge ID
    """
    data = _with_primary_category(df).filter(pl.col(GENAGE_ID).is_not_null())
    if data.height == 0:
        raise ValueError("No GenAge IDs to plot")

    primary = data["primary_category"].to_list()
    categories = list(dict.fromkeys(primary))
    z = [categories.index(category) for category in primary]

    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(projection="3d")

    scatter = ax.scatter(
        data[GENAGE_ID].to_list(),
        data[CATEGORY_COUNT].to_list(),
        z,
        c=z,
        cmap="viridis",
        s=40,
        depthshade=True,
    )

    ax.set_xlabel("GenAge ID")
    ax.set_ylabel("Number of categories")
    ax.set_zlabel("Primary category")
    ax.set_zticks(range(len(categories)))
    ax.set_zticklabels(categories)
    ax.set_title("GenAge ID vs Category Breadth")
    fig.colorbar(scatter, ax=ax, shrink=0.6, label="Primary category index")

    _save(fig, output_path, dpi)
    logger.info(f"Saved 3D scatter plot to {output_path}")
    return output_path


def plot_sample_distributions(
    sample_a: list[float],
    sample_b: list[float],
    label_a: str,
    label_b: str,
    output_path: Path,
    dpi: int = 150,
) -> Path:
    """
    Box plot with overlaid points for the two hypothesis test samples.

    Returns:
        Path to the saved PNG file
    """
    pdf = pl.DataFrame({
        "group": [label_a] * len(sample_a) + [label_b] * len(sample_b),
        "genage_id": list(sample_a) + list(sample_b),
    }).to_pandas()

    fig, ax = plt.subplots(figsize=(6, 6))

    sns.boxplot(data=pdf, x="group", y="genage_id", hue="group", palette="Set2", legend=False, ax=ax)
    sns.stripplot(data=pdf, x="group", y="genage_id", color="black", alpha=0.6, ax=ax)

    ax.set_xlabel("Category substring")
    ax.set_ylabel("GenAge ID")
    ax.set_title(f"GenAge ID: '{label_a}' vs '{label_b}'")

    _save(fig, output_path, dpi)
    logger.info(f"Saved sample distribution plot to {output_path}")
    return output_path


def generate_all_plots(
    df: pl.DataFrame,
    output_dir: Path,
    matrix: CooccurrenceMatrix | None = None,
    subset: pl.DataFrame | None = None,
    samples: tuple[list[float], list[float], str, str] | None = None,
    top_n: int = 10,
    dpi: int = 150,
) -> dict[str, Path]:
    """
    Generate every report figure.

    Args:
        df: Standardized GenAge table
        output_dir: Directory where plots will be saved
        matrix: Co-occurrence matrix (heatmap skipped if None)
        subset: Records used for the matrix (tile plot skipped if None)
        samples: (sample_a, sample_b, label_a, label_b) for the test plot
        top_n: Bars in the category frequency chart
        dpi: Output resolution

    Returns:
        Dictionary mapping plot name to file path

    Notes:
        - Each plot is wrapped in try/except so one failure does not stop the rest
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    jobs = {
        "category_frequency": lambda path: plot_category_frequency(df, path, top_n=top_n, dpi=dpi),
        "genage_id_tiles": lambda path: plot_genage_id_tiles(df, path, dpi=dpi),
        "scatter_3d": lambda path: plot_3d_scatter(df, path, dpi=dpi),
    }
    if matrix is not None:
        jobs["cooccurrence_heatmap"] = lambda path: plot_cooccurrence_heatmap(matrix, path, dpi=dpi)
    if subset is not None:
        jobs["category_tiles"] = lambda path: plot_category_tiles(subset, path, dpi=dpi)
    if samples is not None:
        jobs["sample_distributions"] = lambda path: plot_sample_distributions(*samples, path, dpi=dpi)

    plots = {}
    for name, job in jobs.items():
        try:
            plots[name] = job(output_dir / f"{name}.png")
        except Exception as e:
            logger.warning(f"Failed to create {name} plot: {e}")

    logger.info(f"Generated {len(plots)} plots in {output_dir}")
    return plots

"""Tests for figure generation."""

from pathlib import Path

import polars as pl
import pytest

from genage_eda.analysis.cooccurrence import build_cooccurrence_matrix, select_multi_category
from genage_eda.output.visualizations import (
    generate_all_plots,
    plot_3d_scatter,
    plot_category_frequency,
    plot_category_tiles,
    plot_cooccurrence_heatmap,
    plot_genage_id_tiles,
    plot_sample_distributions,
)

CATEGORY_CYCLE = ["mammal", "mammal,cell", "cell", "human,cell,functional", "model", ""]


@pytest.fixture
def synthetic_genes_df():
    """Create synthetic GenAge table with 30 genes."""
    return pl.DataFrame(
        {
            "symbol": [f"GENE{i}" for i in range(30)],
            "name": [f"gene {i}" for i in range(30)],
            "genage_id": [i * 10 + 1 if i % 7 else None for i in range(30)],
            "why": [CATEGORY_CYCLE[i % len(CATEGORY_CYCLE)] for i in range(30)],
        },
        schema={"symbol": pl.Utf8, "name": pl.Utf8, "genage_id": pl.Int64, "why": pl.Utf8},
    )


def assert_png(path: Path, result: Path):
    assert result == path
    assert path.exists()
    assert path.stat().st_size > 0


def test_plot_category_frequency_creates_file(synthetic_genes_df, tmp_path):
    output_path = tmp_path / "frequency.png"

    result = plot_category_frequency(synthetic_genes_df, output_path, top_n=3, dpi=60)

    assert_png(output_path, result)


def test_plot_cooccurrence_heatmap_creates_file(tmp_path):
    matrix = build_cooccurrence_matrix([["mammal", "cell"], ["human", "cell", "functional"]])
    output_path = tmp_path / "heatmap.png"

    result = plot_cooccurrence_heatmap(matrix, output_path, dpi=60)

    assert_png(output_path, result)


def test_plot_cooccurrence_heatmap_rejects_empty(tmp_path):
    with pytest.raises(ValueError):
        plot_cooccurrence_heatmap(build_cooccurrence_matrix([]), tmp_path / "empty.png")


def test_plot_category_tiles_creates_file(synthetic_genes_df, tmp_path):
    subset = select_multi_category(synthetic_genes_df, max_records=6)
    output_path = tmp_path / "tiles.png"

    result = plot_category_tiles(subset, output_path, dpi=60)

    assert_png(output_path, result)


def test_plot_genage_id_tiles_creates_file(synthetic_genes_df, tmp_path):
    output_path = tmp_path / "id_tiles.png"

    result = plot_genage_id_tiles(synthetic_genes_df, output_path, bins=5, dpi=60)

    assert_png(output_path, result)


def test_plot_genage_id_tiles_single_id(tmp_path):
    """One distinct ID still bins without error."""
    df = pl.DataFrame({
        "symbol": ["GHR"], "name": ["ghr"], "genage_id": [1], "why": ["mammal"],
    })
    output_path = tmp_path / "one.png"

    assert_png(output_path, plot_genage_id_tiles(df, output_path, dpi=60))


def test_plot_3d_scatter_creates_file(synthetic_genes_df, tmp_path):
    output_path = tmp_path / "scatter.png"

    result = plot_3d_scatter(synthetic_genes_df, output_path, dpi=60)

    assert_png(output_path, result)


def test_plot_sample_distributions_creates_file(tmp_path):
    output_path = tmp_path / "samples.png"

    result = plot_sample_distributions(
        [1.0, 4.0, 8.0], [9.0, 19.0, 20.0], "mammal", "cell", output_path, dpi=60
    )

    assert_png(output_path, result)


def test_generate_all_plots_creates_all_files(synthetic_genes_df, tmp_path):
    output_dir = tmp_path / "plots"
    subset = select_multi_category(synthetic_genes_df, max_records=5)
    matrix = build_cooccurrence_matrix(
        [why.split(",") for why in subset["why"].to_list()]
    )

    plots = generate_all_plots(
        synthetic_genes_df,
        output_dir,
        matrix=matrix,
        subset=subset,
        samples=([1.0, 2.0, 3.0], [4.0, 5.0, 6.0], "mammal", "cell"),
        dpi=60,
    )

    assert set(plots) == {
        "category_frequency",
        "genage_id_tiles",
        "scatter_3d",
        "cooccurrence_heatmap",
        "category_tiles",
        "sample_distributions",
    }
    for name, path in plots.items():
        assert path == output_dir / f"{name}.png"
        assert path.exists()


def test_generate_all_plots_optional_inputs(synthetic_genes_df, tmp_path):
    """Without matrix, subset or samples only the table-driven plots are made."""
    plots = generate_all_plots(synthetic_genes_df, tmp_path / "plots", dpi=60)

    assert set(plots) == {"category_frequency", "genage_id_tiles", "scatter_3d"}


def test_plots_handle_empty_dataframe(tmp_path):
    """Test that plots handle empty DataFrames without crashing."""
    empty_df = pl.DataFrame(
        {"symbol": [], "name": [], "genage_id": [], "why": []},
        schema={"symbol": pl.Utf8, "name": pl.Utf8, "genage_id": pl.Int64, "why": pl.Utf8},
    )

    plots = generate_all_plots(
        empty_df,
        tmp_path / "empty_plots",
        matrix=build_cooccurrence_matrix([]),
        subset=empty_df,
    )

    assert isinstance(plots, dict)
    assert "cooccurrence_heatmap" not in plots
    assert "genage_id_tiles" not in plots

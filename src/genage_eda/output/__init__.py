"""Output generation: result tables, figures and the slide report."""

from genage_eda.output.report import EdaReport, generate_eda_report
from genage_eda.output.visualizations import (
    generate_all_plots,
    plot_3d_scatter,
    plot_category_frequency,
    plot_category_tiles,
    plot_cooccurrence_heatmap,
    plot_genage_id_tiles,
    plot_sample_distributions,
)
from genage_eda.output.writers import write_table

__all__ = [
    "EdaReport",
    "generate_eda_report",
    "generate_all_plots",
    "plot_3d_scatter",
    "plot_category_frequency",
    "plot_category_tiles",
    "plot_cooccurrence_heatmap",
    "plot_genage_id_tiles",
    "plot_sample_distributions",
    "write_table",
]

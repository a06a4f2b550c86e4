"""Slide-style Markdown report and JSON summary of an analysis run."""

import json
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import polars as pl
import scipy

from genage_eda.analysis.cooccurrence import CooccurrenceMatrix
from genage_eda.analysis.hypothesis import WelchTestResult
from genage_eda.config.schema import ReportConfig
from genage_eda.provenance import ProvenanceTracker

SLIDE_BREAK = "\n---\n"

PLOT_TITLES = {
    "category_frequency": "Most Common Reasons for Inclusion",
    "category_tiles": "Category Membership",
    "genage_id_tiles": "GenAge ID by Primary Category",
    "scatter_3d": "GenAge ID vs Category Breadth",
    "cooccurrence_heatmap": "Category Co-occurrence",
    "sample_distributions": "Hypothesis Test Samples",
}


def _format_value(value: float | None, spec: str) -> str:
    return "undefined" if value is None else format(value, spec)


@dataclass
class EdaReport:
    """
    Everything produced by one report run.

    Holds plain values only so it serializes directly to JSON:
    - Descriptive statistics
    - Co-occurrence matrix and its strongest pairs
    - Welch t-test result, or the reason it could not run
    - Figure paths relative to the report directory
    """

    run_id: str
    timestamp: str
    package_version: str
    input_path: str
    parameters: dict
    software_environment: dict
    statistics: dict
    cooccurrence: dict = field(default_factory=dict)
    hypothesis: dict | None = None
    hypothesis_error: str | None = None
    plots: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "package_version": self.package_version,
            "input_path": self.input_path,
            "parameters": self.parameters,
            "software_environment": self.software_environment,
            "statistics": self.statistics,
            "cooccurrence": self.cooccurrence,
            "hypothesis": self.hypothesis,
            "hypothesis_error": self.hypothesis_error,
            "plots": self.plots,
        }

    def to_json(self, path: Path) -> Path:
        """
        Write report as JSON file.

        Args:
            path: Output path for JSON file

        Returns:
            Path to the written file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str, allow_nan=False)

        return path

    def slides(self) -> list[str]:
        """Markdown source of each slide, in presentation order."""
        stats = self.statistics
        slides = [
            "\n".join([
                "# Genes Associated with Human Aging",
                "",
                "Exploratory analysis of the GenAge human gene table",
                "",
                f"- Source: `{self.input_path}`",
                f"- Generated: {self.timestamp}",
                f"- Version: {self.package_version}",
            ]),
        ]

        proportion = stats.get("multi_category_proportion", 0.0)
        top = stats.get("top_category")
        overview = [
            "## Dataset Overview",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Genes | {stats.get('total_genes', 0)} |",
            f"| Unique symbols | {stats.get('unique_symbols', 0)} |",
            f"| Multi-category genes | {stats.get('multi_category_count', 0)} ({proportion:.1%}) |",
            f"| Distinct categories | {stats.get('category_cardinality', 0)} |",
            f"| Most connected gene | {stats.get('most_connected_gene') or 'none'} |",
        ]
        if top is not None:
            overview.append(f"| Most common reason | {top['why'] or '(none)'} ({top['count']}) |")
        slides.append("\n".join(overview))

        frequency = stats.get("category_frequency", [])
        if frequency:
            lines = [
                "## Reasons for Inclusion",
                "",
                "| Reason | Genes |",
                "|--------|-------|",
            ]
            for row in frequency:
                lines.append(f"| {row['why'] or '(none)'} | {row['count']} |")
            slides.append(self._with_plot("\n".join(lines), "category_frequency"))

        for name in ("genage_id_tiles", "scatter_3d", "category_tiles"):
            if name in self.plots:
                slides.append(self._with_plot(f"## {PLOT_TITLES[name]}", name))

        pairs = self.cooccurrence.get("top_pairs", [])
        lines = ["## Category Co-occurrence", ""]
        lines.append(
            f"First {self.cooccurrence.get('records', 0)} multi-category genes, "
            f"{len(self.cooccurrence.get('labels', []))} categories"
        )
        if pairs:
            lines.extend(["", "| Categories | Genes |", "|------------|-------|"])
            for pair in pairs:
                lines.append(f"| {pair['first']} + {pair['second']} | {pair['count']} |")
        slides.append(self._with_plot("\n".join(lines), "cooccurrence_heatmap"))

        lines = ["## Hypothesis Test: Welch Two-sample t-test", ""]
        if self.hypothesis is not None:
            h = self.hypothesis
            lines.extend([
                f"GenAge ID of genes matching '{h['label_a']}' vs '{h['label_b']}'",
                "",
                "| | Value |",
                "|--|-------|",
                f"| n ({h['label_a']} / {h['label_b']}) | {h['n_a']} / {h['n_b']} |",
                f"| Means | {h['mean_a']:.2f} / {h['mean_b']:.2f} |",
                f"| t | {_format_value(h['statistic'], '.4f')} |",
                f"| df | {_format_value(h['degrees_of_freedom'], '.2f')} |",
                f"| p-value | {_format_value(h['p_value'], '.4g')} |",
                "",
                h["interpretation"],
            ])
        else:
            lines.append(f"Test not run: {self.hypothesis_error}")
        slides.append(self._with_plot("\n".join(lines), "sample_distributions"))

        return slides

    def _with_plot(self, text: str, plot_name: str) -> str:
        if plot_name not in self.plots:
            return text
        title = PLOT_TITLES.get(plot_name, plot_name)
        return f"{text}\n\n![{title}]({self.plots[plot_name]})"

    def to_markdown(self, path: Path) -> Path:
        """
        Write report as a Markdown slide deck (slides separated by ---).

        Args:
            path: Output path for Markdown file

        Returns:
            Path to the written file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(SLIDE_BREAK.join(self.slides()))
            f.write("\n")

        return path


def generate_eda_report(
    config: ReportConfig,
    statistics: dict,
    provenance: ProvenanceTracker,
    matrix: CooccurrenceMatrix | None = None,
    selected_records: int = 0,
    test_result: WelchTestResult | None = None,
    test_error: str | None = None,
    plots: dict[str, Path] | None = None,
) -> EdaReport:
    """
    Assemble the report from computed results.

    Args:
        config: Report configuration
        statistics: Output of analysis.descriptive.summarize()
        provenance: Provenance tracker for the run
        matrix: Co-occurrence matrix (None if it could not be built)
        selected_records: Number of records the matrix was built from
        test_result: Welch t-test result (None if it could not run)
        test_error: Reason the test did not run
        plots: Figure paths; stored relative to config.output_dir when possible

    Returns:
        EdaReport instance
    """
    cooccurrence = {}
    if matrix is not None:
        cooccurrence = {
            **matrix.to_dict(),
            "records": selected_records,
            "max_records": config.cooccurrence.max_records,
            "top_pairs": matrix.top_pairs(config.plots.top_n),
        }

    hypothesis = None
    if test_result is not None:
        hypothesis = {
            **test_result.to_dict(),
            "alpha": config.hypothesis.alpha,
            "significant": test_result.is_significant(config.hypothesis.alpha),
            "interpretation": test_result.interpretation(config.hypothesis.alpha),
        }

    relative_plots = {}
    for name, plot_path in (plots or {}).items():
        try:
            relative_plots[name] = str(Path(plot_path).relative_to(config.output_dir))
        except ValueError:
            relative_plots[name] = str(plot_path)

    return EdaReport(
        run_id=str(uuid.uuid4()),
        timestamp=datetime.now(timezone.utc).isoformat(),
        package_version=provenance.package_version,
        input_path=str(config.input_path),
        parameters={
            "cooccurrence": config.cooccurrence.model_dump(),
            "hypothesis": config.hypothesis.model_dump(),
            "config_hash": provenance.config_hash,
        },
        software_environment={
            "python": sys.version.split()[0],
            "polars": pl.__version__,
            "numpy": np.__version__,
            "scipy": scipy.__version__,
        },
        statistics=statistics,
        cooccurrence=cooccurrence,
        hypothesis=hypothesis,
        hypothesis_error=test_error,
        plots=relative_plots,
    )

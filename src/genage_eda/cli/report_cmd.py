"""Report command: compute statistics, figures and the slide report.

Orchestrates the full run:
- Loads the GenAge table
- Computes descriptive statistics
- Builds the category co-occurrence matrix
- Runs the Welch t-test
- Writes TSV+Parquet tables, figures, summary JSON and Markdown slides
"""

import logging
import sys
from pathlib import Path

import click

from genage_eda.analysis import (
    category_frequency,
    cooccurrence_from_table,
    extract_samples,
    select_multi_category,
    summarize,
    welch_t_test,
)
from genage_eda.config.loader import load_config_with_overrides
from genage_eda.dataset import load_genage
from genage_eda.errors import DataLoadError, InsufficientSampleError
from genage_eda.output import generate_all_plots, generate_eda_report, write_table
from genage_eda.provenance import ProvenanceTracker

logger = logging.getLogger(__name__)


@click.command('report')
@click.option(
    '--input', 'input_path',
    type=click.Path(path_type=Path),
    default=None,
    help='GenAge file to analyze (default: input_path from config)'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory (default: output_dir from config)'
)
@click.option(
    '--max-records',
    type=click.IntRange(min=1),
    default=None,
    help='Build the co-occurrence matrix from the first N multi-category genes'
)
@click.option(
    '--force',
    is_flag=True,
    help='Overwrite existing report files'
)
@click.option(
    '--skip-viz',
    is_flag=True,
    help='Skip figure generation'
)
@click.pass_context
def report(ctx, input_path, output_dir, max_records, force, skip_viz):
    """Generate statistics, figures and a Markdown slide report.

    Pipeline steps:
    1. Load the GenAge table
    2. Compute descriptive statistics
    3. Build the category co-occurrence matrix
    4. Run the Welch t-test (a failure here does not stop the report)
    5. Write result tables (TSV + Parquet)
    6. Generate figures (unless --skip-viz)
    7. Write summary.json and report.md

    Examples:

        # Full report with defaults
        genage-eda report

        # Different input and output locations
        genage-eda report --input data/genage_human.csv --output-dir /tmp/genage

        # Co-occurrence over the first 50 multi-category genes
        genage-eda report --max-records 50
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== GenAge Report Generation ===", bold=True))
    click.echo()

    try:
        # Load config
        click.echo("Loading configuration...")
        config = load_config_with_overrides(config_path, {
            'input_path': input_path,
            'output_dir': output_dir,
            'cooccurrence.max_records': max_records,
        })
        click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
        click.echo()

        output_dir = Path(config.output_dir)
        report_md = output_dir / "report.md"

        if report_md.exists() and not force:
            click.echo(click.style(
                f"Warning: Report already exists at {output_dir}",
                fg='yellow'
            ))
            click.echo(click.style(
                "  Use --force to overwrite existing files.",
                fg='yellow'
            ))
            click.echo()
            return

        provenance = ProvenanceTracker.from_config(config)

        # Step 1: Load dataset
        click.echo(click.style("Step 1: Loading GenAge table...", bold=True))

        try:
            df = load_genage(config.input_path, separator=config.dataset.separator)
        except DataLoadError as e:
            click.echo(click.style(f"  Error loading dataset: {e}", fg='red'), err=True)
            sys.exit(1)

        click.echo(click.style(
            f"  Loaded {df.height} genes from {config.input_path}",
            fg='green'
        ))
        click.echo()
        provenance.record_step('load_dataset', {
            'input_path': str(config.input_path),
            'row_count': df.height,
            'missing_genage_id': df['genage_id'].null_count(),
        })

        # Step 2: Descriptive statistics
        click.echo(click.style("Step 2: Computing descriptive statistics...", bold=True))
        summary = summarize(df, top_n=config.plots.top_n)
        click.echo(click.style(
            f"  {summary['total_genes']} genes, {summary['unique_symbols']} unique symbols, "
            f"{summary['multi_category_count']} multi-category, "
            f"{summary['category_cardinality']} distinct categories",
            fg='green'
        ))
        click.echo()
        provenance.record_step('descriptive_statistics', {
            'total_genes': summary['total_genes'],
            'multi_category_count': summary['multi_category_count'],
        })

        # Step 3: Co-occurrence matrix
        click.echo(click.style("Step 3: Building co-occurrence matrix...", bold=True))
        max_records = config.cooccurrence.max_records
        subset = select_multi_category(df, max_records=max_records)
        matrix = cooccurrence_from_table(df, max_records=max_records)
        click.echo(click.style(
            f"  {matrix.size} categories from the first {subset.height} multi-category genes",
            fg='green'
        ))
        click.echo()
        provenance.record_step('cooccurrence_matrix', {
            'max_records': max_records,
            'selected_records': subset.height,
            'vocabulary_size': matrix.size,
        })

        # Step 4: Hypothesis test
        hypothesis = config.hypothesis
        click.echo(click.style(
            f"Step 4: Welch t-test '{hypothesis.group_a}' vs '{hypothesis.group_b}'...",
            bold=True
        ))
        sample_a, sample_b = extract_samples(df, hypothesis.group_a, hypothesis.group_b)
        test_result = None
        test_error = None
        try:
            test_result = welch_t_test(
                sample_a, sample_b,
                label_a=hypothesis.group_a,
                label_b=hypothesis.group_b,
            )
            click.echo(click.style(
                f"  t = {test_result.statistic:.4f}, df = {test_result.degrees_of_freedom:.2f}, "
                f"p = {test_result.p_value:.4g}",
                fg='green'
            ))
        except InsufficientSampleError as e:
            test_error = str(e)
            click.echo(click.style(f"  Warning: Hypothesis test skipped: {e}", fg='yellow'))
            logger.warning(f"Hypothesis test skipped: {e}")

        click.echo()
        provenance.record_step('hypothesis_test', {
            'group_a': hypothesis.group_a,
            'group_b': hypothesis.group_b,
            'n_a': len(sample_a),
            'n_b': len(sample_b),
            'completed': test_result is not None,
        })

        # Step 5: Result tables
        click.echo(click.style("Step 5: Writing result tables...", bold=True))
        tables_dir = output_dir / "tables"
        frequency_paths = write_table(
            category_frequency(df),
            tables_dir,
            "category_frequency",
            description="Genes per raw why value, most frequent first",
        )
        cooccurrence_paths = write_table(
            matrix.to_frame(),
            tables_dir,
            "cooccurrence",
            description=f"Category co-occurrence over the first {subset.height} multi-category genes",
        )
        for paths in (frequency_paths, cooccurrence_paths):
            click.echo(click.style(f"  TSV:     {paths['tsv']}", fg='green'))
            click.echo(click.style(f"  Parquet: {paths['parquet']}", fg='green'))
        click.echo()
        provenance.record_step('write_tables', {
            'tables_dir': str(tables_dir),
        })

        # Step 6: Figures
        plot_paths = {}
        if not skip_viz:
            click.echo(click.style("Step 6: Generating figures...", bold=True))
            plots_dir = output_dir / "plots"

            try:
                plot_paths = generate_all_plots(
                    df,
                    plots_dir,
                    matrix=matrix,
                    subset=subset,
                    samples=(sample_a, sample_b, hypothesis.group_a, hypothesis.group_b),
                    top_n=config.plots.top_n,
                    dpi=config.plots.dpi,
                )
                for plot_name, plot_path in plot_paths.items():
                    click.echo(click.style(f"  {plot_name}: {plot_path}", fg='green'))
            except Exception as e:
                click.echo(click.style(f"  Warning: Figure generation failed: {e}", fg='yellow'))
                logger.exception("Failed to generate figures")

            click.echo()
            provenance.record_step('generate_figures', {
                'plots_dir': str(plots_dir),
                'plot_count': len(plot_paths),
            })
        else:
            click.echo(click.style("Step 6: Skipping figures (--skip-viz)", fg='yellow'))
            click.echo()

        # Step 7: Summary and slides
        click.echo(click.style("Step 7: Writing summary and slides...", bold=True))
        report_obj = generate_eda_report(
            config=config,
            statistics=summary,
            provenance=provenance,
            matrix=matrix,
            selected_records=subset.height,
            test_result=test_result,
            test_error=test_error,
            plots=plot_paths,
        )
        json_path = report_obj.to_json(output_dir / "summary.json")
        md_path = report_obj.to_markdown(report_md)
        click.echo(click.style(f"  JSON:     {json_path}", fg='green'))
        click.echo(click.style(f"  Markdown: {md_path}", fg='green'))
        click.echo()
        provenance.record_step('write_report', {
            'json_path': str(json_path),
            'markdown_path': str(md_path),
            'slide_count': len(report_obj.slides()),
        })

        provenance_path = provenance.save_sidecar(report_md)
        click.echo(click.style(f"Provenance saved: {provenance_path}", fg='green'))
        click.echo()

        click.echo(click.style("=== Final Summary ===", bold=True))
        click.echo(f"Output Directory: {output_dir}")
        click.echo(f"  Genes: {summary['total_genes']}")
        click.echo(f"  Most connected gene: {summary['most_connected_gene'] or 'none'}")
        if test_result is not None:
            click.echo(f"  {test_result.interpretation(hypothesis.alpha)}")
        click.echo()
        click.echo(click.style("Report generation complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Report command failed: {e}", fg='red'), err=True)
        logger.exception("Report command failed")
        sys.exit(1)

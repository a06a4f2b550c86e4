"""Main CLI entry point for genage-eda.

Provides command group with global options and subcommands for the report.
"""

import logging
from pathlib import Path

import click
import structlog

from genage_eda import __version__
from genage_eda.config.loader import load_config
from genage_eda.cli.report_cmd import report
from genage_eda.cli.stats_cmd import stats


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Route structlog events from the analysis modules through stdlib logging
# so they share the handler, level and stderr stream configured above.
structlog.configure(
    processors=[structlog.processors.KeyValueRenderer(key_order=['event'])],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to report configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """genage-eda: Exploratory analysis report for genes associated with human aging.

    Loads the GenAge table, computes descriptive statistics, builds a category
    co-occurrence matrix, runs a Welch t-test and renders a slide report.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display version and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"genage-eda v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  Input:  {config.input_path}")
        click.echo(f"  Output: {config.output_dir}")
        click.echo()

        click.echo(click.style("Analysis:", bold=True))
        click.echo(f"  Co-occurrence records: first {config.cooccurrence.max_records} multi-category genes")
        click.echo(f"  t-test groups: '{config.hypothesis.group_a}' vs '{config.hypothesis.group_b}'")
        click.echo(f"  Alpha: {config.hypothesis.alpha}")
        click.echo()

        click.echo(click.style("Plots:", bold=True))
        click.echo(f"  DPI: {config.plots.dpi}")
        click.echo(f"  Top N: {config.plots.top_n}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


# Register commands
cli.add_command(stats)
cli.add_command(report)


if __name__ == '__main__':
    cli()

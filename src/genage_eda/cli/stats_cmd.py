"""Stats command: print descriptive statistics and the t-test result."""

import json
import logging
import sys
from pathlib import Path

import click

from genage_eda.analysis import run_hypothesis_test, summarize
from genage_eda.config.loader import load_config_with_overrides
from genage_eda.dataset import load_genage
from genage_eda.errors import DataLoadError, InsufficientSampleError

logger = logging.getLogger(__name__)


@click.command('stats')
@click.option(
    '--input', 'input_path',
    type=click.Path(path_type=Path),
    default=None,
    help='GenAge file to analyze (default: input_path from config)'
)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print results as JSON instead of text'
)
@click.pass_context
def stats(ctx, input_path, as_json):
    """Print dataset statistics and the Welch t-test without writing files.

    Examples:

        genage-eda stats

        genage-eda stats --input data/genage_human.csv --json
    """
    config_path = ctx.obj['config_path']

    try:
        config = load_config_with_overrides(config_path, {'input_path': input_path})
        df = load_genage(config.input_path, separator=config.dataset.separator)
    except DataLoadError as e:
        click.echo(click.style(f"Error loading dataset: {e}", fg='red'), err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)

    summary = summarize(df, top_n=config.plots.top_n)

    hypothesis = config.hypothesis
    test_result = None
    test_error = None
    try:
        test_result = run_hypothesis_test(df, hypothesis.group_a, hypothesis.group_b)
    except InsufficientSampleError as e:
        test_error = str(e)
        logger.warning(f"Hypothesis test skipped: {e}")

    if as_json:
        payload = {
            'statistics': summary,
            'hypothesis': test_result.to_dict() if test_result else None,
            'hypothesis_error': test_error,
        }
        click.echo(json.dumps(payload, indent=2, default=str, allow_nan=False))
        return

    click.echo(click.style("=== Dataset Statistics ===", bold=True))
    click.echo(f"  Total genes:          {summary['total_genes']}")
    click.echo(f"  Unique symbols:       {summary['unique_symbols']}")
    click.echo(
        f"  Multi-category genes: {summary['multi_category_count']} "
        f"({summary['multi_category_proportion']:.1%})"
    )
    click.echo(f"  Distinct categories:  {summary['category_cardinality']}")
    click.echo(f"  Most connected gene:  {summary['most_connected_gene'] or 'none'}")
    click.echo()

    click.echo(click.style("Reasons for inclusion:", bold=True))
    for row in summary['category_frequency']:
        click.echo(f"  {row['count']:>5}  {row['why'] or '(none)'}")
    click.echo()

    click.echo(click.style(
        f"Welch t-test ('{hypothesis.group_a}' vs '{hypothesis.group_b}'):", bold=True
    ))
    if test_result is None:
        click.echo(click.style(f"  Skipped: {test_error}", fg='yellow'))
    else:
        click.echo(f"  n:       {test_result.n_a} / {test_result.n_b}")
        click.echo(f"  Means:   {test_result.mean_a:.2f} / {test_result.mean_b:.2f}")
        click.echo(f"  t:       {test_result.statistic:.4f}")
        click.echo(f"  df:      {test_result.degrees_of_freedom:.2f}")
        click.echo(f"  p-value: {test_result.p_value:.4g}")
        click.echo(f"  {test_result.interpretation(hypothesis.alpha)}")

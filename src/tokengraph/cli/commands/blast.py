"""
Blast Command - Dependencies and downstream impact of a single token.
"""

import logging
import sys
from contextlib import nullcontext

import click

from ...analysis.dependency_analyzer import TokenDependencyAnalyzer
from ...core.exceptions import TokenNotFoundError
from ..formatting import print_token_analysis
from ..renderers import JsonRenderer
from ..utils import echo_error, get_config, load_token_system

logger = logging.getLogger(__name__)


@click.command()
@click.argument("token_file", type=click.Path())
@click.argument("token_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (Standard Envelope)")
@click.pass_context
def blast(ctx: click.Context, token_file: str, token_id: str, as_json: bool) -> None:
    """
    Calculate what breaks if TOKEN_ID changes.
    """
    renderer = JsonRenderer("blast")
    context_manager = renderer.capture() if as_json else nullcontext()

    error_to_report = None
    result = None

    with context_manager:
        try:
            system = load_token_system(token_file)
            analyzer = TokenDependencyAnalyzer(get_config(ctx).analysis)
            result = analyzer.analyze_token(system, token_id)
            if result is None:
                raise TokenNotFoundError(token_id)
        except Exception as e:
            logger.debug(f"blast failed: {e}", exc_info=True)
            error_to_report = e

    if error_to_report:
        if as_json:
            renderer.render_error(error_to_report)
        else:
            echo_error(str(error_to_report))
        sys.exit(1)

    if as_json:
        renderer.render_success(result)
    else:
        print_token_analysis(result)

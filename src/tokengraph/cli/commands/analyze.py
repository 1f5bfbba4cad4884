"""
Analyze Command - Global dependency analysis of a token system.
"""

import logging
import sys
from contextlib import nullcontext

import click

from ...analysis.dependency_analyzer import TokenDependencyAnalyzer
from ..formatting import print_global_analysis
from ..renderers import JsonRenderer
from ..utils import echo_error, get_config, load_token_system

logger = logging.getLogger(__name__)


@click.command()
@click.argument("token_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (Standard Envelope)")
@click.pass_context
def analyze(ctx: click.Context, token_file: str, as_json: bool) -> None:
    """
    Analyze alias depth, cycles and coupling across all tokens.
    """
    renderer = JsonRenderer("analyze")
    context_manager = renderer.capture() if as_json else nullcontext()

    error_to_report = None
    result = None

    with context_manager:
        try:
            system = load_token_system(token_file)
            analyzer = TokenDependencyAnalyzer(get_config(ctx).analysis)
            result = analyzer.analyze_dependencies(system)
        except Exception as e:
            logger.debug(f"analyze failed: {e}", exc_info=True)
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
        print_global_analysis(result)

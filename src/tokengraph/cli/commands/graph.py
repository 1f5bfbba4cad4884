"""
Graph Command - Export the token dependency graph.

Produces the node/edge/cluster projection used by force-directed views,
either as a JSON file (-o), as a JSON envelope on stdout (--json) or as
a summary table.
"""

import logging
import sys
from contextlib import nullcontext
from typing import Optional, Tuple

import click

from ...transformers.base import FilterOptions, TransformOptions
from ...transformers.registry import VisualizationType, create_default_registry
from ..formatting import print_dependency_graph
from ..renderers import JsonRenderer
from ..utils import echo_error, echo_info, echo_success, get_config, load_token_system, write_output

logger = logging.getLogger(__name__)


@click.command()
@click.argument("token_file", type=click.Path())
@click.option("-o", "--output", default=None, help="Write graph data to a JSON file")
@click.option("--type", "value_types", multiple=True, help="Only include tokens of this resolved value type")
@click.option("--collection", "collections", multiple=True, help="Only include tokens in this collection")
@click.option("--no-aliases", is_flag=True, help="Exclude alias tokens")
@click.option("--min-depth", type=int, default=None, help="Minimum dependency depth")
@click.option("--max-depth", type=int, default=None, help="Maximum dependency depth")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (Standard Envelope)")
@click.pass_context
def graph(
    ctx: click.Context,
    token_file: str,
    output: Optional[str],
    value_types: Tuple[str, ...],
    collections: Tuple[str, ...],
    no_aliases: bool,
    min_depth: Optional[int],
    max_depth: Optional[int],
    as_json: bool,
) -> None:
    """
    Build the token dependency graph.
    """
    renderer = JsonRenderer("graph")
    context_manager = renderer.capture() if as_json else nullcontext()

    error_to_report = None
    result = None

    options = TransformOptions(filters=FilterOptions(
        resolved_value_types=list(value_types),
        collections=list(collections),
        include_aliases=not no_aliases,
        min_dependency_depth=min_depth,
        max_dependency_depth=max_depth,
    ))

    with context_manager:
        try:
            system = load_token_system(token_file)
            registry = create_default_registry(get_config(ctx))
            result = registry.transform(system, VisualizationType.NETWORK, options)
            if output:
                write_output(result, output)
        except Exception as e:
            logger.debug(f"graph failed: {e}", exc_info=True)
            error_to_report = e

    if error_to_report:
        if as_json:
            renderer.render_error(error_to_report)
        else:
            echo_error(str(error_to_report))
        sys.exit(1)

    if as_json:
        renderer.render_success(result)
        return

    print_dependency_graph(result)
    if output:
        echo_success(f"Graph written to {output}")
    else:
        echo_info("Use -o FILE to export the full data")

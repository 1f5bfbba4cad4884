"""
Chord Command - Export mode and platform conflict data.
"""

import logging
import sys
from contextlib import nullcontext
from typing import Optional

import click

from ...transformers.base import TransformOptions
from ...transformers.registry import VisualizationType, create_default_registry
from ..formatting import print_chord_data
from ..renderers import JsonRenderer
from ..utils import echo_error, echo_info, echo_success, get_config, load_token_system, write_output

logger = logging.getLogger(__name__)


@click.command()
@click.argument("token_file", type=click.Path())
@click.option("-o", "--output", default=None, help="Write chord data to a JSON file")
@click.option("--platform-links", is_flag=True, help="Include mode-to-platform override links")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (Standard Envelope)")
@click.pass_context
def chord(ctx: click.Context, token_file: str, output: Optional[str], platform_links: bool, as_json: bool) -> None:
    """
    Build the mode/platform coupling and conflict data.
    """
    renderer = JsonRenderer("chord")
    context_manager = renderer.capture() if as_json else nullcontext()

    error_to_report = None
    result = None

    with context_manager:
        try:
            system = load_token_system(token_file)
            registry = create_default_registry(get_config(ctx))
            result = registry.transform(
                system,
                VisualizationType.CHORD,
                TransformOptions(include_platform_links=platform_links),
            )
            if output:
                write_output(result, output)
        except Exception as e:
            logger.debug(f"chord failed: {e}", exc_info=True)
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

    print_chord_data(result)
    if output:
        echo_success(f"Chord data written to {output}")
    else:
        echo_info("Use -o FILE to export the full data")

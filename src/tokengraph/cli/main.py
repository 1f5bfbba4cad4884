"""
tokengraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging
from typing import Optional

import click

from ..config import load_config
from ..core.exceptions import InvalidConfigError
from .commands import analyze, blast, chord, demo, graph, validate


@click.group()
@click.version_option(package_name="tokengraph")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Path to config YAML (default: .tokengraph/config.yaml)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """tokengraph: Dependency analysis for design tokens.

    Finds circular aliases, dangling references and deep alias chains,
    and exports graph and chord data for visualization.

    \b
    Quick Start:
      tokengraph demo
      tokengraph validate tokens.json
      tokengraph blast tokens.json color-blue-500
      tokengraph graph tokens.json -o graph.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(config_path)
    except InvalidConfigError as e:
        raise click.BadParameter(e.message, param_hint="--config") from e

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# Register commands
main.add_command(analyze.analyze)
main.add_command(validate.validate)
main.add_command(graph.graph)
main.add_command(chord.chord)
main.add_command(blast.blast)
main.add_command(demo.demo)

if __name__ == "__main__":
    main()

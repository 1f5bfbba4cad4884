"""
Demo Command - Write an example token system to try tokengraph instantly.
"""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel

from ...config import DEFAULT_CONFIG_PATH, TokenGraphConfig
from ...core.demo import DemoManager

console = Console()


@click.command()
@click.argument("directory", default=".", type=click.Path(file_okay=False))
@click.option("--with-config", is_flag=True, help="Also write a default .tokengraph/config.yaml")
def demo(directory: str, with_config: bool) -> None:
    """
    Create a sample tokens.json in DIRECTORY.

    The sample contains alias chains, a circular reference and a dangling
    alias so every report has something to show.
    """
    console.print(Panel.fit("🚀 [bold blue]tokengraph demo[/bold blue]", border_style="blue"))

    root_dir = Path(directory)
    tokens_file = DemoManager(root_dir).provision()
    console.print(f"📂 Created demo token system at: [bold]{tokens_file}[/bold]")

    if with_config:
        config_file = root_dir / DEFAULT_CONFIG_PATH
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            yaml.dump(TokenGraphConfig().model_dump(), f, sort_keys=False, default_flow_style=False)
        console.print(f"   Config created at: [dim]{config_file}[/dim]")

    console.print("\n[bold green]Ready to go! Try these commands:[/bold green]")
    console.print(f"1. [bold cyan]tokengraph analyze {tokens_file}[/bold cyan]")
    console.print(f"2. [bold cyan]tokengraph validate {tokens_file}[/bold cyan]")
    console.print(f"3. [bold cyan]tokengraph blast {tokens_file} color-blue-500[/bold cyan]")

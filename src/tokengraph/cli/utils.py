"""
CLI Utilities - Shared helper functions for command line operations.

This module provides common functionality used across the CLI commands,
including formatted printing, token system loading and writing results.
"""

import json
from pathlib import Path

import click
from pydantic import BaseModel

from ..config import TokenGraphConfig
from ..core.types import TokenSystem


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The info message to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def load_token_system(token_file: str) -> TokenSystem:
    """
    Load a TokenSystem from a JSON or YAML file.

    Raises:
        InvalidTokenSystemError: If the file is missing, unparsable or fails validation.
    """
    return TokenSystem.from_file(Path(token_file))


def get_config(ctx: click.Context) -> TokenGraphConfig:
    """The configuration loaded by the root command, or defaults."""
    obj = ctx.find_root().obj or {}
    return obj.get("config") or TokenGraphConfig()


def write_output(data: BaseModel, output: str) -> Path:
    """Write a result model to a JSON file using camelCase keys."""
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data.model_dump(mode="json", by_alias=True), indent=2))
    return path

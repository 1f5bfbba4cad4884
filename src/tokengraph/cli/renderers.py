"""
JSON output envelope shared by every command run with --json.

    {"meta": {"status": "success" | "error", "command": "<name>", "version": "..."},
     "data": {...} | null,
     "error": {"type": ..., "message": ..., "details": {...}} | null}
"""

import io
import json
from contextlib import contextmanager, redirect_stdout
from typing import Any, Dict, Iterator

import click
from pydantic import BaseModel

from .. import __version__
from ..core.exceptions import TokenGraphError


class JsonRenderer:
    """Renders command results as a single JSON document on stdout."""

    def __init__(self, command: str):
        self.command = command

    @contextmanager
    def capture(self) -> Iterator[io.StringIO]:
        """Swallow stray stdout while the command runs so the envelope stays parseable."""
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            yield buffer

    def _meta(self, status: str) -> Dict[str, Any]:
        return {"status": status, "command": self.command, "version": __version__}

    def render_success(self, data: Any) -> None:
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", by_alias=True)
        self._emit({"meta": self._meta("success"), "data": data, "error": None})

    def render_error(self, error: Exception) -> None:
        if isinstance(error, TokenGraphError):
            payload = error.to_dict()
        else:
            payload = {"type": error.__class__.__name__, "message": str(error), "details": {}}
        self._emit({"meta": self._meta("error"), "data": None, "error": payload})

    def _emit(self, envelope: Dict[str, Any]) -> None:
        click.echo(json.dumps(envelope, indent=2, default=str))

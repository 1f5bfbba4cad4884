"""Unit tests for CLI utilities."""

import json

import click
import pytest

from tokengraph.cli.utils import echo_error, echo_info, echo_warning, get_config, load_token_system, write_output
from tokengraph.config import AnalysisConfig, TokenGraphConfig
from tokengraph.core.demo import DemoManager
from tokengraph.core.exceptions import InvalidTokenSystemError
from tokengraph.transformers.network_types import ReferencedTokenSummary


class TestUtils:
    def test_load_token_system(self, tmp_path):
        path = DemoManager(tmp_path).provision()
        system = load_token_system(str(path))
        assert len(system.tokens) == 14

    def test_load_token_system_missing(self, tmp_path):
        with pytest.raises(InvalidTokenSystemError, match="not found"):
            load_token_system(str(tmp_path / "missing.json"))

    def test_echo_error_goes_to_stderr(self, capsys):
        echo_error("Something broke")
        captured = capsys.readouterr()
        assert "Something broke" in captured.err
        assert captured.out == ""

    def test_echo_warning_and_info_go_to_stdout(self, capsys):
        echo_warning("Careful")
        echo_info("Hint")
        captured = capsys.readouterr()
        assert "⚠️  Careful" in captured.out
        assert "   Hint" in captured.out
        assert captured.err == ""

    def test_write_output_uses_camel_case(self, tmp_path):
        summary = ReferencedTokenSummary(token_id="a", name="A", reference_count=1)
        target = write_output(summary, str(tmp_path / "out" / "summary.json"))
        assert json.loads(target.read_text()) == {"tokenId": "a", "name": "A", "referenceCount": 1}

    def test_get_config_defaults(self):
        ctx = click.Context(click.Command("x"))
        assert get_config(ctx) == TokenGraphConfig()

    def test_get_config_from_root(self):
        config = TokenGraphConfig(analysis=AnalysisConfig(deep_nesting_threshold=1))
        root = click.Context(click.Group("root"), obj={"config": config})
        child = click.Context(click.Command("child"), parent=root)
        assert get_config(child) is config

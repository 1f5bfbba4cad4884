"""
Unit tests for the 'demo' command.
"""

import yaml
from click.testing import CliRunner

from tokengraph.cli.commands.demo import demo
from tokengraph.config import load_config
from tokengraph.core.types import TokenSystem


class TestDemoCommand:

    def test_creates_tokens_file(self, tmp_path):
        result = CliRunner().invoke(demo, [str(tmp_path)])

        assert result.exit_code == 0
        tokens_file = tmp_path / "tokens.json"
        assert tokens_file.exists()
        assert len(TokenSystem.from_file(tokens_file).tokens) == 14
        assert "tokengraph validate" in result.output
        assert not (tmp_path / ".tokengraph").exists()

    def test_with_config(self, tmp_path):
        result = CliRunner().invoke(demo, [str(tmp_path), "--with-config"])

        assert result.exit_code == 0
        config_file = tmp_path / ".tokengraph" / "config.yaml"
        data = yaml.safe_load(config_file.read_text())
        assert data["analysis"]["deep_nesting_threshold"] == 5
        assert load_config(config_file).chord.volatile_token_limit == 20

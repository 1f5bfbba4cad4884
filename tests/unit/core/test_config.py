"""
Unit tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from tokengraph.config import (
    ALWAYS_TOGETHER_THRESHOLD,
    DEEP_NESTING_THRESHOLD,
    VOLATILE_TOKEN_LIMIT,
    TokenGraphConfig,
    load_config,
)
from tokengraph.core.exceptions import InvalidConfigError


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == TokenGraphConfig()
        assert config.analysis.deep_nesting_threshold == DEEP_NESTING_THRESHOLD
        assert config.chord.always_together_threshold == ALWAYS_TOGETHER_THRESHOLD
        assert config.chord.volatile_token_limit == VOLATILE_TOKEN_LIMIT

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("analysis:\n  deep_nesting_threshold: 2\n")
        config = load_config(path)
        assert config.analysis.deep_nesting_threshold == 2
        assert config.analysis.impact_high_threshold == 10
        assert config.chord.coupling_significance_threshold == 0.3

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == TokenGraphConfig()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("analysis: [unclosed\n")
        with pytest.raises(InvalidConfigError, match="Could not parse"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(InvalidConfigError, match="mapping"):
            load_config(path)

    def test_out_of_range_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("chord:\n  volatility_floor: 3\n")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.details["errors"]

    def test_config_is_frozen(self):
        config = TokenGraphConfig()
        with pytest.raises(ValidationError):
            config.analysis.deep_nesting_threshold = 1

"""
Global Configuration and Policy Defaults.

This module centralizes the thresholds used by the analyzer and the
transformers. They are policy constants, not derived values: the
defaults reproduce the behaviour the rendering layer was tuned against,
and a project can override them in .tokengraph/config.yaml.
"""

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core.exceptions import InvalidConfigError

DEFAULT_CONFIG_PATH = Path(".tokengraph/config.yaml")

# --- Dependency analysis ---
# Tokens deeper than this produce a deep_nesting warning
DEEP_NESTING_THRESHOLD = 5

# Blast radius tiers, on the number of directly affected tokens
IMPACT_MEDIUM_THRESHOLD = 5
IMPACT_HIGH_THRESHOLD = 10

MOST_REFERENCED_LIMIT = 10
DEEPEST_CHAINS_LIMIT = 5

# --- Mode / platform conflict analysis ---
COUPLING_SIGNIFICANCE_THRESHOLD = 0.3
ALWAYS_TOGETHER_THRESHOLD = 0.8
CONDITIONAL_THRESHOLD = 0.5

# Mode pairs below this strength get no chord link
COUPLING_LINK_THRESHOLD = 0.1

# Volatility ranking is capped for legibility of the chart
VOLATILITY_FLOOR = 0.1
VOLATILE_TOKEN_LIMIT = 20


class AnalysisConfig(BaseModel):
    """Thresholds used by the dependency analyzer."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    deep_nesting_threshold: int = Field(default=DEEP_NESTING_THRESHOLD, ge=0)
    impact_medium_threshold: int = Field(default=IMPACT_MEDIUM_THRESHOLD, ge=0)
    impact_high_threshold: int = Field(default=IMPACT_HIGH_THRESHOLD, ge=0)
    most_referenced_limit: int = Field(default=MOST_REFERENCED_LIMIT, ge=1)
    deepest_chains_limit: int = Field(default=DEEPEST_CHAINS_LIMIT, ge=1)


class ChordConfig(BaseModel):
    """Thresholds used by the mode/platform conflict transformer."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    coupling_significance_threshold: float = Field(default=COUPLING_SIGNIFICANCE_THRESHOLD, ge=0, le=1)
    always_together_threshold: float = Field(default=ALWAYS_TOGETHER_THRESHOLD, ge=0, le=1)
    conditional_threshold: float = Field(default=CONDITIONAL_THRESHOLD, ge=0, le=1)
    coupling_link_threshold: float = Field(default=COUPLING_LINK_THRESHOLD, ge=0, le=1)
    volatility_floor: float = Field(default=VOLATILITY_FLOOR, ge=0, le=1)
    volatile_token_limit: int = Field(default=VOLATILE_TOKEN_LIMIT, ge=0)


class TokenGraphConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    chord: ChordConfig = Field(default_factory=ChordConfig)


def load_config(path: Union[str, Path, None] = None) -> TokenGraphConfig:
    """
    Load configuration from YAML.

    A missing file yields the defaults; an unreadable or invalid one raises
    InvalidConfigError.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return TokenGraphConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfigError(f"{config_path} must contain a mapping")

    try:
        return TokenGraphConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(
            f"Invalid configuration in {config_path}",
            {"errors": e.errors(include_url=False, include_context=False)},
        ) from e

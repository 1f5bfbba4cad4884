"""
Base Transformer Infrastructure.

A transformer turns a token system snapshot into one visualization-ready
data structure. Input is validated before any analysis runs, and a
failure part way through is surfaced as a TransformationError rather than
returning a half-built result.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import InvalidTokenSystemError, TokenGraphError, TransformationError
from ..core.types import TokenSystem

TOutput = TypeVar("TOutput")


class FilterOptions(BaseModel):
    """Node filters applied by the dependency graph transformer."""

    model_config = ConfigDict(frozen=True)

    resolved_value_types: List[str] = Field(default_factory=list)
    collections: List[str] = Field(default_factory=list)
    include_aliases: bool = True
    min_dependency_depth: Optional[int] = None
    max_dependency_depth: Optional[int] = None


class TransformOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    filters: Optional[FilterOptions] = None
    include_platform_links: bool = False


class BaseTransformer(ABC, Generic[TOutput]):
    """Abstract base class for all visualization transformers."""

    def __init__(self, name: str):
        self.name = name
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def transform(self, token_system: Any, options: TransformOptions | None = None) -> TOutput:
        """Validate input and run the transformation."""
        system = self.validate_input(token_system)
        options = options or TransformOptions()

        self._logger.debug(f"[{self.name}] Starting transformation of {len(system.tokens)} tokens")
        try:
            result = self._transform(system, options)
        except TokenGraphError:
            raise
        except Exception as e:
            self._logger.error(f"[{self.name}] Transformation failed: {e}")
            raise TransformationError(self.name, "transform", e) from e

        self._logger.info(f"[{self.name}] Transformation completed")
        return result

    def validate_input(self, token_system: Any) -> TokenSystem:
        """Return a TokenSystem or raise InvalidTokenSystemError."""
        if token_system is None:
            raise InvalidTokenSystemError(f"[{self.name}] Token system is missing")
        if isinstance(token_system, TokenSystem):
            return token_system
        return TokenSystem.from_dict(token_system)

    @abstractmethod
    def _transform(self, system: TokenSystem, options: TransformOptions) -> TOutput:
        pass

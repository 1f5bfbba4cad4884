"""
Transformer Registry.

Routes a visualization type key to the transformer that produces its data.
Callers own their registry instance; there is no process-wide singleton.
"""

import logging
from enum import StrEnum
from typing import Any, Dict, List

from ..config import TokenGraphConfig
from ..core.exceptions import UnknownVisualizationError
from .base import BaseTransformer, TransformOptions
from .chord import ChordDataTransformer
from .token_dependency import TokenDependencyTransformer

logger = logging.getLogger(__name__)


class VisualizationType(StrEnum):
    NETWORK = "network"
    CHORD = "chord"


class TransformerRegistry:
    """Maps visualization types to transformer instances."""

    def __init__(self):
        self._transformers: Dict[str, BaseTransformer] = {}

    def register(self, visualization_type: str, transformer: BaseTransformer) -> None:
        logger.debug(f"Registering transformer for type: {visualization_type}")
        self._transformers[str(visualization_type)] = transformer

    def get(self, visualization_type: str) -> BaseTransformer:
        transformer = self._transformers.get(str(visualization_type))
        if transformer is None:
            raise UnknownVisualizationError(str(visualization_type))
        return transformer

    def transform(
        self,
        token_system: Any,
        visualization_type: str,
        options: TransformOptions | None = None,
    ) -> Any:
        """Run the transformer registered for visualization_type."""
        return self.get(visualization_type).transform(token_system, options)

    def available_types(self) -> List[str]:
        return list(self._transformers)

    def is_supported(self, visualization_type: str) -> bool:
        return str(visualization_type) in self._transformers

    def clear(self) -> None:
        self._transformers.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "registered_types": self.available_types(),
            "total_transformers": len(self._transformers),
        }


def create_default_registry(config: TokenGraphConfig | None = None) -> TransformerRegistry:
    """Registry with the network and chord transformers."""
    config = config or TokenGraphConfig()
    registry = TransformerRegistry()
    registry.register(VisualizationType.NETWORK, TokenDependencyTransformer(config.analysis))
    registry.register(VisualizationType.CHORD, ChordDataTransformer(config.chord))
    return registry

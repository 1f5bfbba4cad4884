"""Visualization transformers: dependency graph and mode/platform chord data."""

from .base import BaseTransformer, FilterOptions, TransformOptions
from .chord import ChordDataTransformer
from .registry import TransformerRegistry, VisualizationType, create_default_registry
from .token_dependency import TokenDependencyTransformer

__all__ = [
    "BaseTransformer",
    "ChordDataTransformer",
    "FilterOptions",
    "TokenDependencyTransformer",
    "TransformOptions",
    "TransformerRegistry",
    "VisualizationType",
    "create_default_registry",
]

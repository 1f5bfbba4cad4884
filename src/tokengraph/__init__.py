"""
tokengraph - Dependency analysis for design-token systems.

Builds the alias dependency graph of a token system, detects cycles,
computes depth and blast-radius metrics, and projects the result into
visualization-ready shapes.

Key Components:
- core: Token system model and dependency maps
- analysis: Depth, cycle, blast radius and validation analysis
- transformers: Dependency graph and mode/platform chord projections

Usage:
    from tokengraph import TokenSystem, create_default_registry

    system = TokenSystem.from_file("tokens.json")
    graph = create_default_registry().transform(system, "network")
"""

__version__ = "0.1.0"

from .analysis.dependency_analyzer import AnalysisContext, TokenDependencyAnalyzer
from .core.types import AliasValue, LiteralValue, Token, TokenSystem
from .transformers.registry import TransformerRegistry, VisualizationType, create_default_registry

__all__ = [
    "__version__",
    "AliasValue",
    "AnalysisContext",
    "LiteralValue",
    "Token",
    "TokenDependencyAnalyzer",
    "TokenSystem",
    "TransformerRegistry",
    "VisualizationType",
    "create_default_registry",
]

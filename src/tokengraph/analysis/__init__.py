"""Dependency analysis over token alias graphs."""

from .dependency_analyzer import (
    AnalysisContext,
    TokenDependencyAnalyzer,
    calculate_blast_radius,
    compute_depths,
    detect_circular_dependencies,
)

__all__ = [
    "AnalysisContext",
    "TokenDependencyAnalyzer",
    "calculate_blast_radius",
    "compute_depths",
    "detect_circular_dependencies",
]

from .dependency_map import DependencyMaps, build_dependency_maps
from .exceptions import (
    InvalidConfigError,
    InvalidTokenSystemError,
    TokenGraphError,
    TokenNotFoundError,
    TransformationError,
    UnknownVisualizationError,
)
from .types import AliasValue, LiteralValue, Mode, ModeValue, Platform, Token, TokenSystem

__all__ = [
    "AliasValue",
    "DependencyMaps",
    "InvalidConfigError",
    "InvalidTokenSystemError",
    "LiteralValue",
    "Mode",
    "ModeValue",
    "Platform",
    "Token",
    "TokenGraphError",
    "TokenNotFoundError",
    "TokenSystem",
    "TransformationError",
    "UnknownVisualizationError",
    "build_dependency_maps",
]

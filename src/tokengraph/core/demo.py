"""
Demo Manager - Scaffolds an example token system.

Provides a small but realistic token system that exercises every part of
the analysis: light/dark modes, ios/android platform overrides, multi-level
alias chains, a circular reference and an alias to a token that does not
exist. Used by the `tokengraph demo` command and by the test suite.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .types import TokenSystem

logger = logging.getLogger(__name__)


def _literal(value: Any, *mode_ids: str) -> Dict[str, Any]:
    return {"modeIds": list(mode_ids), "value": {"value": value}}


def _alias(token_id: str, *mode_ids: str) -> Dict[str, Any]:
    return {"modeIds": list(mode_ids), "value": {"tokenId": token_id}}


def _token(token_id: str, name: str, value_type: str, collection: str, values: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "id": token_id,
        "displayName": name,
        "resolvedValueTypeId": value_type,
        "tokenCollectionId": collection,
        "valuesByMode": values,
    }


class DemoManager:
    """
    Manages the creation of the demo token system.
    """

    FILE_NAME = "tokens.json"

    RESOLVED_VALUE_TYPES = [
        {"id": "color", "displayName": "Color", "type": "COLOR"},
        {"id": "dimension", "displayName": "Dimension", "type": "DIMENSION"},
    ]

    DIMENSIONS = [
        {
            "id": "theme",
            "displayName": "Theme",
            "defaultMode": "light",
            "modes": [
                {"id": "light", "name": "Light", "dimensionId": "theme"},
                {"id": "dark", "name": "Dark", "dimensionId": "theme"},
            ],
        }
    ]

    PLATFORMS = [
        {"id": "ios", "displayName": "iOS"},
        {"id": "android", "displayName": "Android"},
    ]

    TOKENS = [
        # Palette: literal values only
        _token("color-blue-500", "Blue 500", "color", "palette",
               [_literal("#3b82f6", "light"), _literal("#60a5fa", "dark")]),
        _token("color-gray-900", "Gray 900", "color", "palette",
               [_literal("#111827")]),
        _token("color-white", "White", "color", "palette",
               [_literal("#ffffff")]),
        _token("color-red-500", "Red 500", "color", "palette",
               [_literal("#ef4444", "light"), _literal("#f87171", "dark")]),
        _token("spacing-base", "Spacing Base", "dimension", "scale",
               [_literal(4)]),
        # Semantic layer: aliases into the palette
        _token("color-primary", "Primary", "color", "semantic", [
            {
                **_alias("color-blue-500", "light"),
                "platformOverrides": [{"platformId": "ios", "value": "#007aff"}],
            },
            _alias("color-blue-500", "dark"),
        ]),
        _token("color-text", "Text", "color", "semantic",
               [_alias("color-gray-900", "light"), _alias("color-white", "dark")]),
        _token("spacing-md", "Spacing Medium", "dimension", "scale",
               [_alias("spacing-base")]),
        # Component layer: second-level aliases
        _token("button-background", "Button Background", "color", "component",
               [_alias("color-primary")]),
        _token("button-text", "Button Text", "color", "component",
               [_alias("color-text")]),
        _token("button-padding", "Button Padding", "dimension", "component",
               [_alias("spacing-md")]),
        # Broken on purpose
        _token("focus-ring", "Focus Ring", "color", "component",
               [_alias("focus-outline")]),
        _token("focus-outline", "Focus Outline", "color", "component",
               [_alias("focus-ring")]),
        _token("badge-border", "Badge Border", "color", "component",
               [_alias("color-brand-legacy")]),
    ]

    def __init__(self, root_dir: Path | None = None):
        self.root_dir = root_dir or Path.cwd()

    def document(self) -> Dict[str, Any]:
        """The demo system as a camelCase JSON document."""
        return {
            "systemName": "Demo Design System",
            "systemId": "demo",
            "resolvedValueTypes": self.RESOLVED_VALUE_TYPES,
            "dimensions": self.DIMENSIONS,
            "platforms": self.PLATFORMS,
            "tokens": self.TOKENS,
        }

    def build_system(self) -> TokenSystem:
        return TokenSystem.from_dict(self.document())

    def provision(self) -> Path:
        """
        Write the demo token system to disk.

        Returns:
            Path: The path to the created tokens file.
        """
        self.root_dir.mkdir(parents=True, exist_ok=True)
        target = self.root_dir / self.FILE_NAME
        target.write_text(json.dumps(self.document(), indent=2))
        logger.info(f"Demo token system written to {target}")
        return target


def build_demo_system() -> TokenSystem:
    """Return the demo token system without touching the filesystem."""
    return DemoManager().build_system()

"""Shared fixtures for the tokengraph test suite."""

from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from tokengraph.core.demo import build_demo_system
from tokengraph.core.types import Token, TokenSystem


def _make_token(
    token_id: str,
    aliases: Sequence[str] = (),
    literal: Any = "#000000",
    value_type: str = "color",
    collection: Optional[str] = None,
    name: Optional[str] = None,
) -> Token:
    """
    Build a token. One alias becomes the global value; several aliases are
    spread over synthetic modes m0, m1, ... so the token keeps one entry per alias.
    """
    if not aliases:
        values = [{"modeIds": [], "value": {"value": literal}}]
    elif len(aliases) == 1:
        values = [{"modeIds": [], "value": {"tokenId": aliases[0]}}]
    else:
        values = [
            {"modeIds": [f"m{i}"], "value": {"tokenId": target}}
            for i, target in enumerate(aliases)
        ]
    return Token.model_validate({
        "id": token_id,
        "displayName": name or token_id,
        "resolvedValueTypeId": value_type,
        "tokenCollectionId": collection,
        "valuesByMode": values,
    })


def _make_system(
    tokens: Iterable[Token],
    modes: Sequence[str] = (),
    platforms: Sequence[str] = (),
    value_types: Sequence[Dict[str, str]] = ({"id": "color", "displayName": "Color", "type": "COLOR"},),
) -> TokenSystem:
    dimensions: List[Dict[str, Any]] = []
    if modes:
        dimensions.append({
            "id": "theme",
            "displayName": "Theme",
            "modes": [{"id": m, "name": m.title(), "dimensionId": "theme"} for m in modes],
        })
    return TokenSystem(
        tokens=list(tokens),
        resolved_value_types=list(value_types),
        dimensions=dimensions,
        platforms=[{"id": p, "displayName": p.upper()} for p in platforms],
    )


@pytest.fixture
def make_token():
    return _make_token


@pytest.fixture
def make_system():
    return _make_system


@pytest.fixture
def chain_tokens() -> List[Token]:
    """A -> B -> C"""
    return [
        _make_token("A", ["B"]),
        _make_token("B", ["C"]),
        _make_token("C"),
    ]


@pytest.fixture
def demo_system() -> TokenSystem:
    return build_demo_system()

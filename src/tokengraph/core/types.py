"""
Core type definitions for tokengraph.

Models the token system snapshot consumed by the analysis engine: tokens,
their per-mode values, modes grouped into dimensions, platforms and resolved
value types. Field names are snake_case in Python and camelCase in the
JSON documents, so models accept either and dump camelCase with by_alias=True.

A token value is resolved once, at ingestion, into an explicit variant:
LiteralValue or AliasValue. Downstream code matches on the variant instead
of probing dictionaries for a 'tokenId' key.
"""

import json
from pathlib import Path
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .exceptions import InvalidTokenSystemError


class DocumentModel(BaseModel):
    """Base for all token-document models: camelCase aliases, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class LiteralValue(DocumentModel):
    """A concrete value (color, dimension, typography object, ...)."""

    kind: Literal["literal"] = Field(default="literal", exclude=True)
    value: Any = None

    @property
    def is_alias(self) -> bool:
        return False

    def canonical(self) -> str:
        return canonical_json(self.model_dump(by_alias=True, mode="json"))


class AliasValue(DocumentModel):
    """A reference to another token by id."""

    kind: Literal["alias"] = Field(default="alias", exclude=True)
    token_id: str

    @property
    def is_alias(self) -> bool:
        return True

    def canonical(self) -> str:
        return canonical_json(self.model_dump(by_alias=True, mode="json"))


def _value_kind(raw: Any) -> str:
    if isinstance(raw, dict):
        if "tokenId" in raw or "token_id" in raw:
            return "alias"
        return "literal"
    return getattr(raw, "kind", "literal")


TokenValue = Annotated[
    Union[
        Annotated[AliasValue, Tag("alias")],
        Annotated[LiteralValue, Tag("literal")],
    ],
    Discriminator(_value_kind),
]


def canonical_json(data: Any) -> str:
    """Serialize data with sorted keys so structurally equal values compare equal."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


class PlatformOverride(DocumentModel):
    """A platform-specific replacement for a mode value."""

    platform_id: str
    value: Any = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def canonical(self) -> str:
        return canonical_json(self.value)


class ModeValue(DocumentModel):
    """
    One entry of a token's valuesByMode.

    An empty mode_ids list marks the token's global/default value.
    """

    mode_ids: List[str] = Field(default_factory=list)
    value: TokenValue
    metadata: Dict[str, Any] = Field(default_factory=dict)
    platform_overrides: List[PlatformOverride] = Field(default_factory=list)

    @property
    def is_global(self) -> bool:
        return not self.mode_ids

    def override_for(self, platform_id: str) -> Optional[PlatformOverride]:
        for override in self.platform_overrides:
            if override.platform_id == platform_id:
                return override
        return None


class Token(DocumentModel):
    """A design token."""

    id: str
    display_name: str
    resolved_value_type_id: str
    values_by_mode: List[ModeValue] = Field(default_factory=list)
    token_collection_id: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_global_value(self) -> "Token":
        if len(self.values_by_mode) > 1 and any(mv.is_global for mv in self.values_by_mode):
            raise ValueError(
                f"Token {self.id}: an entry with empty modeIds must be the only valuesByMode entry"
            )
        return self

    @property
    def is_alias(self) -> bool:
        """True if any mode value references another token."""
        return any(mv.value.is_alias for mv in self.values_by_mode)

    @property
    def collection_ids(self) -> List[str]:
        return [self.token_collection_id] if self.token_collection_id else []

    @property
    def base_value(self) -> Optional[Union[LiteralValue, AliasValue]]:
        """The first mode value, used as the comparison baseline."""
        if not self.values_by_mode:
            return None
        return self.values_by_mode[0].value

    def aliases(self) -> Iterator[tuple[ModeValue, AliasValue]]:
        """Yield (mode entry, alias) for every alias entry, in entry order."""
        for mv in self.values_by_mode:
            if isinstance(mv.value, AliasValue):
                yield mv, mv.value

    def alias_targets(self) -> List[str]:
        """Referenced token ids, de-duplicated, in first-seen order."""
        targets: Dict[str, None] = {}
        for _, alias in self.aliases():
            targets.setdefault(alias.token_id, None)
        return list(targets)

    def value_for_mode(self, mode_id: str) -> Optional[Union[LiteralValue, AliasValue]]:
        """The first entry whose mode set contains mode_id."""
        for mv in self.values_by_mode:
            if mode_id in mv.mode_ids:
                return mv.value
        return None


class Mode(DocumentModel):
    id: str
    name: str
    dimension_id: Optional[str] = None
    description: Optional[str] = None


class Dimension(DocumentModel):
    id: str
    display_name: str
    modes: List[Mode] = Field(default_factory=list)
    default_mode: Optional[str] = None


class Platform(DocumentModel):
    id: str
    display_name: str


class ResolvedValueType(DocumentModel):
    id: str
    display_name: str
    type: Optional[str] = None


class TokenSystem(DocumentModel):
    """
    Immutable snapshot of a token system as handed over by the storage layer.
    """

    tokens: List[Token] = Field(default_factory=list)
    resolved_value_types: List[ResolvedValueType] = Field(default_factory=list)
    dimensions: List[Dimension] = Field(default_factory=list)
    platforms: List[Platform] = Field(default_factory=list)
    system_name: Optional[str] = None
    system_id: Optional[str] = None

    def modes(self) -> List[Mode]:
        """All modes across dimensions, in dimension order, de-duplicated by id."""
        seen: Dict[str, Mode] = {}
        for dimension in self.dimensions:
            for mode in dimension.modes:
                seen.setdefault(mode.id, mode)
        return list(seen.values())

    def value_type(self, value_type_id: str) -> Optional[ResolvedValueType]:
        for value_type in self.resolved_value_types:
            if value_type.id == value_type_id:
                return value_type
        return None

    @classmethod
    def from_dict(cls, data: Any) -> "TokenSystem":
        if data is None:
            raise InvalidTokenSystemError("Token system is missing")
        if not isinstance(data, dict):
            raise InvalidTokenSystemError(
                f"Token system must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidTokenSystemError(
                "Token system failed schema validation",
                {"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TokenSystem":
        """Load a token system from a JSON or YAML document."""
        path = Path(path)
        if not path.exists():
            raise InvalidTokenSystemError(f"Token system file not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise InvalidTokenSystemError(f"Could not parse {path}: {e}") from e

        return cls.from_dict(data)

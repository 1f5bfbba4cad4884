"""
Chord diagram data types.

Modes and platforms are the nodes here, not tokens. Links refer to nodes
by id and the matrix is indexed in node order.
"""

from enum import StrEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ChordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ChordNodeType(StrEnum):
    MODE = "mode"
    PLATFORM = "platform"
    TOKEN_VALUE_GROUP = "token-value-group"


class ConflictType(StrEnum):
    VALUE_CHANGE = "value-change"
    PLATFORM_OVERRIDE = "platform-override"
    MODE_COUPLING = "mode-coupling"
    VALUE_CONFLICT = "value-conflict"


class CouplingType(StrEnum):
    ALWAYS_TOGETHER = "always-together"
    CONDITIONAL = "conditional"
    INVERSE = "inverse"


class ChordNode(ChordModel):
    id: str
    name: str
    type: ChordNodeType
    mode_id: Optional[str] = None
    platform_id: Optional[str] = None
    token_ids: List[str]
    value_count: int
    color: str
    conflicts: int


class ChordLinkExample(ChordModel):
    token_id: str
    token_name: str
    source_value: Any = None
    target_value: Any = None
    change_type: str


class ChordLink(ChordModel):
    source: str
    target: str
    value: float
    conflict_type: ConflictType
    token_ids: List[str]
    examples: List[ChordLinkExample]


class ModeCoupling(ChordModel):
    mode_ids: List[str]
    mode_names: List[str]
    coupling_strength: float
    shared_token_ids: List[str]
    coupling_type: CouplingType


class ModeConflictMatrix(ChordModel):
    mode_ids: List[str]
    conflicts: List[List[int]]


class VolatileToken(ChordModel):
    token_id: str
    token_name: str
    change_frequency: float
    unique_values: int
    most_common_value: Any = None
    platform_overrides: int


class ModeAnalysis(ChordModel):
    total_modes: int
    mode_couplings: List[ModeCoupling]
    conflict_matrix: ModeConflictMatrix
    most_volatile_tokens: List[VolatileToken]


class PlatformDeviation(ChordModel):
    platform_id: str
    platform_name: str
    deviation_score: float
    affected_token_ids: List[str]
    unique_overrides: int
    inherited_values: int


class OverridePattern(ChordModel):
    pattern: str
    token_ids: List[str]
    frequency: float
    complexity: str
    description: str


class PlatformAnalysis(ChordModel):
    total_platforms: int
    platform_deviations: List[PlatformDeviation]
    override_patterns: List[OverridePattern]
    complexity_score: float


class ChordRecommendation(ChordModel):
    type: str
    severity: str
    title: str
    description: str
    affected_items: List[str]
    estimated_impact: str
    suggested_action: str


class ChordStatistics(ChordModel):
    total_tokens: int
    total_modes: int
    total_platforms: int
    total_conflicts: int
    avg_conflicts_per_token: float
    max_conflicts_per_token: int
    mode_coupling_score: float
    platform_complexity_score: float
    recommendations: List[ChordRecommendation]


class ChordDiagramData(ChordModel):
    nodes: List[ChordNode]
    links: List[ChordLink]
    matrix: List[List[float]]
    mode_analysis: ModeAnalysis
    platform_analysis: PlatformAnalysis
    statistics: ChordStatistics

"""
Analysis result types for token dependency analysis.

All results are frozen once produced. They dump to the camelCase shape
the validation and reporting UI reads (model_dump(by_alias=True)).
"""

from enum import StrEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ImpactTier(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Effort(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CircularDependency(ResultModel):
    """One cycle found by the DFS."""

    id: str
    token_ids: List[str]  # Distinct members in path order
    dependency_chain: List[str]  # Closed chain, first id repeated at the end
    severity: Severity = Severity.ERROR
    description: str
    suggested_resolution: str
    affected_platforms: List[str] = Field(default_factory=list)
    affected_themes: List[str] = Field(default_factory=list)


class BlastRadiusAnalysis(ResultModel):
    directly_affected: List[str]
    indirectly_affected: List[str]
    total_affected: int
    max_depth: int  # Number of reverse hops the impact travels
    estimated_impact: ImpactTier
    affected_platforms: List[str] = Field(default_factory=list)
    affected_themes: List[str] = Field(default_factory=list)
    affected_collections: List[str] = Field(default_factory=list)


class DependencyKind(StrEnum):
    DIRECT = "direct"
    INDIRECT = "indirect"


class TokenDependency(ResultModel):
    """A token reached by following aliases forward."""

    token_id: str
    token_name: str
    dependency_type: DependencyKind
    path: List[str]
    resolved_value_type_id: str


class TokenDependent(ResultModel):
    """A token that reaches this one through its aliases."""

    token_id: str
    token_name: str
    dependency_type: DependencyKind
    path: List[str]
    resolved_value_type_id: str


class TokenDependencyAnalysis(ResultModel):
    token_id: str
    token_name: str
    dependencies: List[TokenDependency]
    dependents: List[TokenDependent]
    dependency_depth: int
    usage_count: int
    has_circular_dependency: bool
    circular_dependency_paths: List[List[str]] = Field(default_factory=list)
    blast_radius: BlastRadiusAnalysis


class DependencyDepthResult(ResultModel):
    token_id: str
    token_name: str
    depth: int
    dependency_chain: List[str]  # From this token down to its deepest leaf
    is_leaf: bool
    is_root: bool


class ReferencedToken(ResultModel):
    token_id: str
    token_name: str
    reference_count: int


class DependencyChain(ResultModel):
    chain: List[str]
    depth: int


class ComplexityMetrics(ResultModel):
    average_references: float
    max_references: int
    dependency_distribution: Dict[int, int]  # depth -> token count


class RecommendationType(StrEnum):
    CIRCULAR_DEPENDENCY = "circular_dependency"
    DEEP_NESTING = "deep_nesting"
    UNUSED_TOKEN = "unused_token"
    HIGH_COUPLING = "high_coupling"
    ARCHITECTURAL_DEBT = "architectural_debt"


class AnalysisRecommendation(ResultModel):
    type: RecommendationType
    severity: Severity
    title: str
    description: str
    affected_tokens: List[str]
    suggested_action: str
    estimated_effort: Effort


class GlobalDependencyAnalysis(ResultModel):
    total_tokens: int
    total_dependencies: int
    circular_dependencies: List[CircularDependency]
    max_dependency_depth: int
    average_dependency_depth: float
    isolated_tokens: List[str]  # No dependencies and no dependents
    root_tokens: List[str]  # Not referenced by others
    leaf_tokens: List[str]  # Reference nothing
    most_referenced_tokens: List[ReferencedToken]
    deepest_dependency_chains: List[DependencyChain]
    complexity_metrics: ComplexityMetrics
    recommendations: List[AnalysisRecommendation]


class ValidationErrorType(StrEnum):
    MISSING_REFERENCE = "missing_reference"
    INVALID_REFERENCE = "invalid_reference"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    TYPE_MISMATCH = "type_mismatch"


class ValidationWarningType(StrEnum):
    DEEP_NESTING = "deep_nesting"
    UNUSED_TOKEN = "unused_token"
    POTENTIAL_CIRCULAR = "potential_circular"
    PERFORMANCE_CONCERN = "performance_concern"


class DependencyValidationError(ResultModel):
    token_id: str
    token_name: str
    error_type: ValidationErrorType
    message: str
    referenced_token_id: Optional[str] = None
    path: List[str] = Field(default_factory=list)


class DependencyValidationWarning(ResultModel):
    token_id: str
    token_name: str
    warning_type: ValidationWarningType
    message: str
    details: Dict[str, object] = Field(default_factory=dict)


class UnresolvedReference(ResultModel):
    token_id: str
    token_name: str
    referenced_token_id: str
    mode_ids: List[str]
    context: str


class DependencyValidationResult(ResultModel):
    is_valid: bool
    errors: List[DependencyValidationError]
    warnings: List[DependencyValidationWarning]
    circular_dependencies: List[CircularDependency]
    unresolved_references: List[UnresolvedReference]

"""
Network graph data types.

Shape consumed by the force-directed renderer. Edges refer to nodes by id;
the renderer indexes both collections by id, so field names are stable.
"""

from enum import StrEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..analysis.results import CircularDependency


class GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TokenNodeType(StrEnum):
    BASE = "base"
    ALIAS = "alias"
    CIRCULAR = "circular"


class EdgeType(StrEnum):
    DIRECT = "direct"
    INDIRECT = "indirect"
    CIRCULAR = "circular"


class TokenNode(GraphModel):
    id: str
    name: str
    display_name: str
    token_id: str
    type: TokenNodeType
    resolved_value_type_id: str
    resolved_value_type_name: str
    resolved_value_type_category: str
    collection_ids: List[str]
    dependency_depth: int
    usage_count: int
    has_circular_dependency: bool
    value: Any = None  # First mode value, for tooltips


class DependencyEdge(GraphModel):
    id: str
    source: str
    target: str
    type: EdgeType
    strength: float
    distance: float


class ClusterInfo(GraphModel):
    id: str
    type: str
    name: str
    node_ids: List[str]
    color: str


class ReferencedTokenSummary(GraphModel):
    token_id: str
    name: str
    reference_count: int


class DeepestChainSummary(GraphModel):
    token_ids: List[str]
    depth: int


class DependencyStatistics(GraphModel):
    total_tokens: int
    total_dependencies: int
    circular_dependencies: int
    max_dependency_depth: int
    avg_dependency_depth: float
    isolated_tokens: int
    most_referenced_token: Optional[ReferencedTokenSummary] = None
    deepest_dependency_chain: Optional[DeepestChainSummary] = None


class TokenDependencyGraph(GraphModel):
    nodes: List[TokenNode]
    edges: List[DependencyEdge]
    clusters: List[ClusterInfo]
    circular_dependencies: List[CircularDependency]
    statistics: DependencyStatistics

    def get_node(self, node_id: str) -> Optional[TokenNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return any(e.source == source_id and e.target == target_id for e in self.edges)

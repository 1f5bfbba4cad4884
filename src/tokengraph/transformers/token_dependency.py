"""
Token Dependency Transformer.

Projects a token system and its dependency analysis into a node/edge
graph for force-directed rendering: one node per token, one edge per
unique alias pair, clusters by resolved value type, and roll-up statistics.
"""

from typing import Dict, List, Sequence

from ..analysis.dependency_analyzer import AnalysisContext, TokenDependencyAnalyzer, deepest_chain
from ..config import AnalysisConfig
from ..core.types import Token, TokenSystem
from .base import BaseTransformer, FilterOptions, TransformOptions
from .network_types import (
    ClusterInfo,
    DeepestChainSummary,
    DependencyEdge,
    DependencyStatistics,
    EdgeType,
    ReferencedTokenSummary,
    TokenDependencyGraph,
    TokenNode,
    TokenNodeType,
)

VALUE_TYPE_COLORS: Dict[str, str] = {
    "COLOR": "#48BB78",
    "DIMENSION": "#4299E1",
    "SPACING": "#667EEA",
    "FONT_FAMILY": "#9F7AEA",
    "FONT_WEIGHT": "#ED64A6",
    "FONT_SIZE": "#F56565",
    "LINE_HEIGHT": "#ED8936",
    "LETTER_SPACING": "#ECC94B",
    "DURATION": "#38B2AC",
    "CUBIC_BEZIER": "#4FD1C5",
    "BLUR": "#4A5568",
    "SPREAD": "#718096",
    "RADIUS": "#A0AEC0",
}
DEFAULT_COLOR = "#A0AEC0"

BASE_EDGE_DISTANCE = 100
CROSS_TYPE_DISTANCE = 50
SHARED_COLLECTION_DISTANCE = 25
MIN_EDGE_DISTANCE = 50


def value_type_color(category: str) -> str:
    return VALUE_TYPE_COLORS.get(category, DEFAULT_COLOR)


class TokenDependencyTransformer(BaseTransformer[TokenDependencyGraph]):
    """Builds the TokenDependencyGraph consumed by the network view."""

    def __init__(self, config: AnalysisConfig | None = None):
        super().__init__("TokenDependencyTransformer")
        self.analyzer = TokenDependencyAnalyzer(config)

    def _transform(self, system: TokenSystem, options: TransformOptions) -> TokenDependencyGraph:
        context = self.analyzer.build_context(system)

        tokens: Sequence[Token] = context.tokens
        if options.filters:
            tokens = self.apply_filters(context, options.filters)
            self._logger.debug(
                f"Applied filters: {len(context.tokens)} -> {len(tokens)} tokens"
            )

        nodes = self._build_nodes(system, context, tokens)
        edges = self._build_edges(tokens, nodes)
        clusters = self._build_clusters(system, nodes)

        node_ids = {n.id for n in nodes}
        circular = [
            c for c in context.circular_dependencies
            if any(token_id in node_ids for token_id in c.token_ids)
        ]

        graph = TokenDependencyGraph(
            nodes=nodes,
            edges=edges,
            clusters=clusters,
            circular_dependencies=circular,
            statistics=self._statistics(context, nodes, edges, circular),
        )
        self._logger.info(
            f"Built dependency graph: {len(nodes)} nodes, {len(edges)} edges, "
            f"{len(clusters)} clusters, {len(circular)} cycles"
        )
        return graph

    def apply_filters(self, context: AnalysisContext, filters: FilterOptions) -> List[Token]:
        kept = []
        for token in context.tokens:
            depth = context.depth(token.id)
            if filters.resolved_value_types and token.resolved_value_type_id not in filters.resolved_value_types:
                continue
            if filters.collections and not set(token.collection_ids) & set(filters.collections):
                continue
            if not filters.include_aliases and token.is_alias:
                continue
            if filters.min_dependency_depth is not None and depth < filters.min_dependency_depth:
                continue
            if filters.max_dependency_depth is not None and depth > filters.max_dependency_depth:
                continue
            kept.append(token)
        return kept

    def _build_nodes(
        self,
        system: TokenSystem,
        context: AnalysisContext,
        tokens: Sequence[Token],
    ) -> List[TokenNode]:
        nodes = []
        for token in tokens:
            value_type = system.value_type(token.resolved_value_type_id)
            circular = token.id in context.cyclic_token_ids

            if circular:
                node_type = TokenNodeType.CIRCULAR
            elif token.is_alias:
                node_type = TokenNodeType.ALIAS
            else:
                node_type = TokenNodeType.BASE

            base_value = token.base_value
            nodes.append(TokenNode(
                id=token.id,
                name=token.display_name,
                display_name=token.display_name,
                token_id=token.id,
                type=node_type,
                resolved_value_type_id=token.resolved_value_type_id,
                resolved_value_type_name=value_type.display_name if value_type else "Unknown",
                resolved_value_type_category=(value_type.type if value_type and value_type.type else "Unknown"),
                collection_ids=token.collection_ids,
                dependency_depth=context.depth(token.id),
                usage_count=len(context.maps.dependents_of(token.id)),
                has_circular_dependency=circular,
                value=base_value.model_dump(by_alias=True, mode="json") if base_value else None,
            ))
        return nodes

    def _build_edges(self, tokens: Sequence[Token], nodes: List[TokenNode]) -> List[DependencyEdge]:
        by_id = {n.id: n for n in nodes}
        edges: List[DependencyEdge] = []
        seen = set()

        for token in tokens:
            source = by_id.get(token.id)
            if source is None:
                continue
            for target_id in token.alias_targets():
                target = by_id.get(target_id)
                # Dangling aliases are validation findings, not edges
                if target is None or (source.id, target.id) in seen:
                    continue
                seen.add((source.id, target.id))

                both_circular = source.has_circular_dependency and target.has_circular_dependency
                edges.append(DependencyEdge(
                    id=f"{source.id}->{target.id}",
                    source=source.id,
                    target=target.id,
                    type=EdgeType.CIRCULAR if both_circular else EdgeType.DIRECT,
                    strength=1,
                    distance=self._edge_distance(source, target),
                ))
        return edges

    @staticmethod
    def _edge_distance(source: TokenNode, target: TokenNode) -> float:
        distance = BASE_EDGE_DISTANCE
        if source.resolved_value_type_id != target.resolved_value_type_id:
            distance += CROSS_TYPE_DISTANCE
        if set(source.collection_ids) & set(target.collection_ids):
            distance -= SHARED_COLLECTION_DISTANCE
        return max(MIN_EDGE_DISTANCE, distance)

    def _build_clusters(self, system: TokenSystem, nodes: List[TokenNode]) -> List[ClusterInfo]:
        groups: Dict[str, List[TokenNode]] = {}
        for node in nodes:
            groups.setdefault(node.resolved_value_type_id, []).append(node)

        clusters = []
        for type_id, members in groups.items():
            if len(members) < 2:
                continue
            value_type = system.value_type(type_id)
            clusters.append(ClusterInfo(
                id=f"cluster-{type_id}",
                type="resolvedValueType",
                name=value_type.display_name if value_type else type_id,
                node_ids=[n.id for n in members],
                color=value_type_color(value_type.type if value_type and value_type.type else "Unknown"),
            ))
        return clusters

    def _statistics(
        self,
        context: AnalysisContext,
        nodes: List[TokenNode],
        edges: List[DependencyEdge],
        circular: list,
    ) -> DependencyStatistics:
        depths = [n.dependency_depth for n in nodes]

        # max() returns the first maximal element, which keeps ties in input order
        most_referenced = max(
            (n for n in nodes if n.usage_count > 0),
            key=lambda n: n.usage_count,
            default=None,
        )
        deepest = max(nodes, key=lambda n: n.dependency_depth, default=None)

        return DependencyStatistics(
            total_tokens=len(nodes),
            total_dependencies=len(edges),
            circular_dependencies=len(circular),
            max_dependency_depth=max(depths, default=0),
            avg_dependency_depth=sum(depths) / len(depths) if depths else 0.0,
            isolated_tokens=sum(1 for n in nodes if context.is_isolated(n.id)),
            most_referenced_token=ReferencedTokenSummary(
                token_id=most_referenced.id,
                name=most_referenced.name,
                reference_count=most_referenced.usage_count,
            ) if most_referenced else None,
            deepest_dependency_chain=DeepestChainSummary(
                token_ids=deepest_chain(context, deepest.id),
                depth=deepest.dependency_depth,
            ) if deepest else None,
        )

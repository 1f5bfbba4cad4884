"""
Token Dependency Analyzer.

Analyzes token alias relationships: dependency depth, circular
dependencies, root/leaf/isolated classification, blast radius, and a
validation report of unresolved references and structural warnings.

All state for one run lives in an AnalysisContext built from a single
token system snapshot. The analyzer itself only holds configuration, so
one instance can serve any number of systems, concurrently, without
memoized state leaking from one system into the next.

Depth policy:
    depth(leaf) = 0
    depth(t)    = 1 + max(depth(d) for d in forward[t])
    A token that is reachable from itself (a cycle participant) has depth 0,
    and a revisit of a token already on the current recursion path
    short-circuits that branch to 0. The short-circuit is never memoized.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

import networkx as nx
from pydantic import ValidationError

from ..config import AnalysisConfig
from ..core.dependency_map import DependencyMaps, build_dependency_maps
from ..core.exceptions import InvalidTokenSystemError
from ..core.types import Token, TokenSystem
from .results import (
    AnalysisRecommendation,
    BlastRadiusAnalysis,
    CircularDependency,
    ComplexityMetrics,
    DependencyChain,
    DependencyDepthResult,
    DependencyKind,
    DependencyValidationError,
    DependencyValidationResult,
    DependencyValidationWarning,
    Effort,
    GlobalDependencyAnalysis,
    ImpactTier,
    RecommendationType,
    ReferencedToken,
    Severity,
    TokenDependency,
    TokenDependencyAnalysis,
    TokenDependent,
    UnresolvedReference,
    ValidationErrorType,
    ValidationWarningType,
)

logger = logging.getLogger(__name__)

TokenSource = Union[TokenSystem, Sequence[Token], "AnalysisContext"]


class _Color(Enum):
    WHITE = 0  # Not yet reached
    GRAY = 1  # On the current DFS path
    BLACK = 2  # Fully explored


_DONE = object()


def find_cycle_participants(graph: nx.DiGraph) -> FrozenSet[str]:
    """Ids of tokens reachable from themselves through one or more aliases."""
    members: Set[str] = set()
    for component in nx.strongly_connected_components(graph):
        if len(component) > 1:
            members.update(component)
    members.update(nx.nodes_with_selfloops(graph))
    return frozenset(members)


def compute_depths(
    maps: DependencyMaps,
    order: Iterable[str],
    cyclic: Optional[FrozenSet[str]] = None,
) -> Dict[str, int]:
    """
    Memoized dependency depth for every id in order.

    The memo is local to this call. The in-progress set is separate from
    the memo, so a cycle only cuts the branch that hit it. The walk keeps
    its own stack of [token_id, remaining deps, best depth so far] frames,
    so chain length is not bounded by the interpreter's recursion limit.
    """
    if cyclic is None:
        cyclic = find_cycle_participants(maps.to_networkx())

    memo: Dict[str, int] = {}

    def depth(root: str) -> int:
        if root in memo:
            return memo[root]
        if root in cyclic:
            return 0

        in_progress = {root}
        stack = [[root, iter(maps.dependencies_of(root)), None]]
        while stack:
            frame = stack[-1]
            dep = next(frame[1], _DONE)
            if dep is _DONE:
                stack.pop()
                in_progress.discard(frame[0])
                result = 0 if frame[2] is None else 1 + frame[2]
                memo[frame[0]] = result
                if stack:
                    parent = stack[-1]
                    parent[2] = result if parent[2] is None else max(parent[2], result)
                continue

            if dep in memo:
                value = memo[dep]
            elif dep in cyclic or dep in in_progress:
                value = 0
            else:
                in_progress.add(dep)
                stack.append([dep, iter(maps.dependencies_of(dep)), None])
                continue
            frame[2] = value if frame[2] is None else max(frame[2], value)

        return memo[root]

    return {token_id: depth(token_id) for token_id in order}


def detect_circular_dependencies(
    order: Iterable[str],
    maps: DependencyMaps,
    names: Optional[Mapping[str, str]] = None,
) -> List[CircularDependency]:
    """
    Find circular dependencies with a white/gray/black DFS.

    Tokens are started in input order and dependencies are followed in
    sorted order, so the reported path for a multi-cycle graph is stable.
    The search continues after each hit; black tokens are never re-entered.
    """
    names = names or {}
    color: Dict[str, _Color] = {}
    cycles: List[CircularDependency] = []

    for start in order:
        if color.get(start, _Color.WHITE) is not _Color.WHITE:
            continue

        color[start] = _Color.GRAY
        path = [start]
        stack = [(start, iter(maps.dependencies_of(start)))]
        while stack:
            token_id, deps = stack[-1]
            dep = next(deps, _DONE)
            if dep is _DONE:
                stack.pop()
                path.pop()
                color[token_id] = _Color.BLACK
                continue

            state = color.get(dep, _Color.WHITE)
            if state is _Color.GRAY:
                cycle_start = path.index(dep)
                cycles.append(_cycle_record(path[cycle_start:] + [dep], names))
            elif state is _Color.WHITE:
                color[dep] = _Color.GRAY
                path.append(dep)
                stack.append((dep, iter(maps.dependencies_of(dep))))

    return cycles


def _cycle_record(chain: List[str], names: Mapping[str, str]) -> CircularDependency:
    labels = " → ".join(names.get(token_id, token_id) for token_id in chain)
    return CircularDependency(
        id=f"circular-{'-'.join(chain)}",
        token_ids=list(dict.fromkeys(chain)),
        dependency_chain=chain,
        severity=Severity.ERROR,
        description=f"Circular dependency detected: {labels}",
        suggested_resolution=(
            f"Break the circular dependency by removing one of the references in the chain: {labels}"
        ),
    )


@dataclass(frozen=True)
class AnalysisContext:
    """
    Everything derived from one token system snapshot.

    Built once per analysis run and passed explicitly to every analysis
    function. The forward and reverse networkx graphs are owned by the
    context and never mutated after construction.
    """

    tokens: Tuple[Token, ...]
    tokens_by_id: Mapping[str, Token]
    maps: DependencyMaps
    graph: nx.DiGraph
    reverse_graph: nx.DiGraph
    depths: Mapping[str, int]
    cyclic_token_ids: FrozenSet[str]
    circular_dependencies: Tuple[CircularDependency, ...]
    config: AnalysisConfig

    @classmethod
    def build(
        cls,
        source: Union[TokenSystem, Sequence[Token]],
        config: Optional[AnalysisConfig] = None,
    ) -> "AnalysisContext":
        tokens = _coerce_tokens(source)
        tokens_by_id: Dict[str, Token] = {}
        for token in tokens:
            if token.id in tokens_by_id:
                raise InvalidTokenSystemError(
                    f"Duplicate token id: {token.id}", {"token_id": token.id}
                )
            tokens_by_id[token.id] = token

        order = [token.id for token in tokens]
        names = {token.id: token.display_name for token in tokens}

        maps = build_dependency_maps(tokens)
        graph = maps.to_networkx()
        cyclic = find_cycle_participants(graph)

        return cls(
            tokens=tokens,
            tokens_by_id=MappingProxyType(tokens_by_id),
            maps=maps,
            graph=graph,
            reverse_graph=maps.to_reverse_networkx(),
            depths=MappingProxyType(compute_depths(maps, order, cyclic)),
            cyclic_token_ids=cyclic,
            circular_dependencies=tuple(detect_circular_dependencies(order, maps, names)),
            config=config or AnalysisConfig(),
        )

    def depth(self, token_id: str) -> int:
        return self.depths.get(token_id, 0)

    def token_name(self, token_id: str) -> str:
        token = self.tokens_by_id.get(token_id)
        return token.display_name if token else token_id

    def is_root(self, token_id: str) -> bool:
        return not self.maps.dependents_of(token_id)

    def is_leaf(self, token_id: str) -> bool:
        return not self.maps.dependencies_of(token_id)

    def is_isolated(self, token_id: str) -> bool:
        return self.is_root(token_id) and self.is_leaf(token_id)


def _coerce_tokens(source: Union[TokenSystem, Sequence[Token], None]) -> Tuple[Token, ...]:
    if source is None:
        raise InvalidTokenSystemError("Token system is missing")
    if isinstance(source, TokenSystem):
        return tuple(source.tokens)
    if not isinstance(source, (list, tuple)):
        raise InvalidTokenSystemError(
            f"Expected a TokenSystem or a sequence of tokens, got {type(source).__name__}"
        )

    tokens = []
    for item in source:
        if isinstance(item, Token):
            tokens.append(item)
        elif isinstance(item, dict):
            try:
                tokens.append(Token.model_validate(item))
            except ValidationError as e:
                raise InvalidTokenSystemError(
                    f"Invalid token entry: {item.get('id', '<no id>')}",
                    {"errors": e.errors(include_url=False, include_context=False)},
                ) from e
        else:
            raise InvalidTokenSystemError(
                f"Expected Token entries, got {type(item).__name__}"
            )
    return tuple(tokens)


def deepest_chain(context: AnalysisContext, token_id: str) -> List[str]:
    """Follow the deepest dependency from token_id down to a leaf."""
    chain = [token_id]
    visited = {token_id}
    current = token_id
    while context.depth(current) > 0:
        wanted = context.depth(current) - 1
        nxt = next(
            (dep for dep in context.maps.dependencies_of(current)
             if context.depth(dep) == wanted and dep not in visited),
            None,
        )
        if nxt is None:
            break
        chain.append(nxt)
        visited.add(nxt)
        current = nxt
    return chain


def calculate_blast_radius(context: AnalysisContext, token_id: str) -> BlastRadiusAnalysis:
    """
    Tokens affected by a change to token_id.

    Direct: tokens aliasing it. Indirect: everything further up the reverse
    graph, layer by layer. The impact tier is taken on the direct count.
    A self-aliasing token is not part of its own blast radius.
    """
    config = context.config
    direct = [d for d in context.maps.dependents_of(token_id) if d != token_id]

    indirect: List[str] = []
    max_depth = 0
    if token_id in context.graph:
        layers = list(nx.bfs_layers(context.reverse_graph, [token_id]))
        max_depth = len(layers) - 1
        for layer in layers[2:]:
            indirect.extend(sorted(layer))

    affected = direct + indirect
    if len(direct) > config.impact_high_threshold:
        tier = ImpactTier.HIGH
    elif len(direct) > config.impact_medium_threshold:
        tier = ImpactTier.MEDIUM
    else:
        tier = ImpactTier.LOW

    collections: Set[str] = set()
    platforms: Set[str] = set()
    for affected_id in affected:
        token = context.tokens_by_id.get(affected_id)
        if token is None:
            continue
        collections.update(token.collection_ids)
        for mv in token.values_by_mode:
            platforms.update(o.platform_id for o in mv.platform_overrides)

    return BlastRadiusAnalysis(
        directly_affected=direct,
        indirectly_affected=indirect,
        total_affected=len(affected),
        max_depth=max_depth,
        estimated_impact=tier,
        affected_platforms=sorted(platforms),
        affected_collections=sorted(collections),
    )


class TokenDependencyAnalyzer:
    """
    Runs the global dependency analysis and per-token queries.

    Every public method accepts a TokenSystem, a token sequence, or an
    already built AnalysisContext.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self._logger = logging.getLogger(f"{__name__}.TokenDependencyAnalyzer")

    def build_context(self, source: TokenSource) -> AnalysisContext:
        if isinstance(source, AnalysisContext):
            return source
        return AnalysisContext.build(source, self.config)

    def analyze_dependencies(self, source: TokenSource) -> GlobalDependencyAnalysis:
        """Global analysis of a token system."""
        context = self.build_context(source)
        self._logger.debug(f"Starting dependency analysis of {len(context.tokens)} tokens")

        depth_results = self.analyze_depths(context)
        depths = [d.depth for d in depth_results]

        result = GlobalDependencyAnalysis(
            total_tokens=len(context.tokens),
            total_dependencies=context.maps.edge_count,
            circular_dependencies=list(context.circular_dependencies),
            max_dependency_depth=max(depths, default=0),
            average_dependency_depth=sum(depths) / len(depths) if depths else 0.0,
            isolated_tokens=[t.id for t in context.tokens if context.is_isolated(t.id)],
            root_tokens=[t.id for t in context.tokens if context.is_root(t.id)],
            leaf_tokens=[t.id for t in context.tokens if context.is_leaf(t.id)],
            most_referenced_tokens=self._most_referenced(context),
            deepest_dependency_chains=self._deepest_chains(context),
            complexity_metrics=self._complexity(context),
            recommendations=self._recommendations(context, depth_results),
        )

        self._logger.info(
            f"Analysis completed: {result.total_tokens} tokens, "
            f"{result.total_dependencies} dependencies, "
            f"{len(result.circular_dependencies)} cycles, max depth {result.max_dependency_depth}"
        )
        return result

    def analyze_depths(self, source: TokenSource) -> List[DependencyDepthResult]:
        context = self.build_context(source)
        return [
            DependencyDepthResult(
                token_id=token.id,
                token_name=token.display_name,
                depth=context.depth(token.id),
                dependency_chain=deepest_chain(context, token.id),
                is_leaf=context.is_leaf(token.id),
                is_root=context.is_root(token.id),
            )
            for token in context.tokens
        ]

    def analyze_token(self, source: TokenSource, token_id: str) -> Optional[TokenDependencyAnalysis]:
        """Dependencies, dependents, depth and blast radius of one token."""
        context = self.build_context(source)
        token = context.tokens_by_id.get(token_id)
        if token is None:
            self._logger.warning(f"Token not found: {token_id}")
            return None

        circular_paths = [
            list(c.dependency_chain)
            for c in context.circular_dependencies
            if token_id in c.token_ids
        ]

        return TokenDependencyAnalysis(
            token_id=token.id,
            token_name=token.display_name,
            dependencies=self._dependencies(context, token_id),
            dependents=self._dependents(context, token_id),
            dependency_depth=context.depth(token_id),
            usage_count=len(context.maps.dependents_of(token_id)),
            has_circular_dependency=token_id in context.cyclic_token_ids,
            circular_dependency_paths=circular_paths,
            blast_radius=calculate_blast_radius(context, token_id),
        )

    def calculate_blast_radius(self, source: TokenSource, token_id: str) -> BlastRadiusAnalysis:
        return calculate_blast_radius(self.build_context(source), token_id)

    def validate_dependencies(self, source: TokenSource) -> DependencyValidationResult:
        """
        Collect structural findings. Never raises for bad references;
        they become errors and warnings in the returned report.
        """
        context = self.build_context(source)
        errors: List[DependencyValidationError] = []
        warnings: List[DependencyValidationWarning] = []
        unresolved: List[UnresolvedReference] = []
        reported: Set[Tuple[str, str]] = set()

        for token in context.tokens:
            for mv, alias in token.aliases():
                target = alias.token_id
                if target in context.tokens_by_id:
                    continue

                modes = ", ".join(mv.mode_ids) if mv.mode_ids else "global"
                unresolved.append(UnresolvedReference(
                    token_id=token.id,
                    token_name=token.display_name,
                    referenced_token_id=target,
                    mode_ids=list(mv.mode_ids),
                    context=f"Mode: {modes}",
                ))
                if (token.id, target) in reported:
                    continue
                reported.add((token.id, target))
                errors.append(DependencyValidationError(
                    token_id=token.id,
                    token_name=token.display_name,
                    error_type=ValidationErrorType.MISSING_REFERENCE,
                    message=f"Token references non-existent token: {target}",
                    referenced_token_id=target,
                    path=[token.id, target],
                ))

        threshold = self.config.deep_nesting_threshold
        for token in context.tokens:
            depth = context.depth(token.id)
            if depth > threshold:
                warnings.append(DependencyValidationWarning(
                    token_id=token.id,
                    token_name=token.display_name,
                    warning_type=ValidationWarningType.DEEP_NESTING,
                    message=f"Token has deep dependency nesting (depth: {depth})",
                    details={"depth": depth, "threshold": threshold},
                ))

        for token in context.tokens:
            if context.is_isolated(token.id):
                warnings.append(DependencyValidationWarning(
                    token_id=token.id,
                    token_name=token.display_name,
                    warning_type=ValidationWarningType.UNUSED_TOKEN,
                    message="Token is not referenced by any other tokens",
                    details={"isolated": True},
                ))

        circular = list(context.circular_dependencies)
        result = DependencyValidationResult(
            is_valid=not errors and not circular,
            errors=errors,
            warnings=warnings,
            circular_dependencies=circular,
            unresolved_references=unresolved,
        )
        self._logger.debug(
            f"Validation: {len(errors)} errors, {len(warnings)} warnings, {len(circular)} cycles"
        )
        return result

    def _dependencies(self, context: AnalysisContext, token_id: str) -> List[TokenDependency]:
        paths = nx.single_source_shortest_path(context.graph, token_id)
        found = []
        for target, path in paths.items():
            token = context.tokens_by_id.get(target)
            if target == token_id or token is None:
                continue
            found.append(TokenDependency(
                token_id=target,
                token_name=token.display_name,
                dependency_type=DependencyKind.DIRECT if len(path) == 2 else DependencyKind.INDIRECT,
                path=list(path),
                resolved_value_type_id=token.resolved_value_type_id,
            ))
        found.sort(key=lambda d: (len(d.path), d.token_id))
        return found

    def _dependents(self, context: AnalysisContext, token_id: str) -> List[TokenDependent]:
        paths = nx.single_source_shortest_path(context.reverse_graph, token_id)
        found = []
        for source, path in paths.items():
            token = context.tokens_by_id.get(source)
            if source == token_id or token is None:
                continue
            found.append(TokenDependent(
                token_id=source,
                token_name=token.display_name,
                dependency_type=DependencyKind.DIRECT if len(path) == 2 else DependencyKind.INDIRECT,
                path=list(reversed(path)),
                resolved_value_type_id=token.resolved_value_type_id,
            ))
        found.sort(key=lambda d: (len(d.path), d.token_id))
        return found

    def _most_referenced(self, context: AnalysisContext) -> List[ReferencedToken]:
        counted = [
            ReferencedToken(
                token_id=token.id,
                token_name=token.display_name,
                reference_count=len(context.maps.dependents_of(token.id)),
            )
            for token in context.tokens
        ]
        counted = [c for c in counted if c.reference_count > 0]
        # sorted() is stable: ties keep input order
        counted = sorted(counted, key=lambda c: -c.reference_count)
        return counted[: self.config.most_referenced_limit]

    def _deepest_chains(self, context: AnalysisContext) -> List[DependencyChain]:
        chains = [
            DependencyChain(chain=deepest_chain(context, token.id), depth=context.depth(token.id))
            for token in context.tokens
            if context.is_root(token.id) and context.depth(token.id) > 0
        ]
        chains = sorted(chains, key=lambda c: -c.depth)
        return chains[: self.config.deepest_chains_limit]

    def _complexity(self, context: AnalysisContext) -> ComplexityMetrics:
        reference_counts = [len(context.maps.dependencies_of(t.id)) for t in context.tokens]
        distribution: Dict[int, int] = {}
        for token in context.tokens:
            depth = context.depth(token.id)
            distribution[depth] = distribution.get(depth, 0) + 1

        return ComplexityMetrics(
            average_references=(
                sum(reference_counts) / len(reference_counts) if reference_counts else 0.0
            ),
            max_references=max(reference_counts, default=0),
            dependency_distribution=dict(sorted(distribution.items())),
        )

    def _recommendations(
        self,
        context: AnalysisContext,
        depth_results: List[DependencyDepthResult],
    ) -> List[AnalysisRecommendation]:
        recommendations: List[AnalysisRecommendation] = []

        for circular in context.circular_dependencies:
            recommendations.append(AnalysisRecommendation(
                type=RecommendationType.CIRCULAR_DEPENDENCY,
                severity=Severity.ERROR,
                title="Circular Dependency Detected",
                description=circular.description,
                affected_tokens=list(circular.token_ids),
                suggested_action=circular.suggested_resolution,
                estimated_effort=Effort.MEDIUM,
            ))

        threshold = self.config.deep_nesting_threshold
        deep = [d for d in depth_results if d.depth > threshold]
        if deep:
            recommendations.append(AnalysisRecommendation(
                type=RecommendationType.DEEP_NESTING,
                severity=Severity.WARNING,
                title="Deep Token Dependencies Detected",
                description=f"{len(deep)} tokens have dependency depth greater than {threshold} levels",
                affected_tokens=[d.token_id for d in deep],
                suggested_action="Consider flattening the dependency hierarchy by creating intermediate tokens",
                estimated_effort=Effort.HIGH,
            ))

        hubs = [
            t.id for t in context.tokens
            if len(context.maps.dependents_of(t.id)) > self.config.impact_high_threshold
        ]
        if hubs:
            recommendations.append(AnalysisRecommendation(
                type=RecommendationType.HIGH_COUPLING,
                severity=Severity.WARNING,
                title="Highly Referenced Tokens",
                description=f"{len(hubs)} tokens are aliased by more than "
                            f"{self.config.impact_high_threshold} other tokens",
                affected_tokens=hubs,
                suggested_action="Review changes to these tokens carefully; consider semantic intermediates",
                estimated_effort=Effort.MEDIUM,
            ))

        isolated = [t.id for t in context.tokens if context.is_isolated(t.id)]
        if isolated:
            recommendations.append(AnalysisRecommendation(
                type=RecommendationType.UNUSED_TOKEN,
                severity=Severity.INFO,
                title="Unreferenced Tokens",
                description=f"{len(isolated)} tokens neither reference nor are referenced by other tokens",
                affected_tokens=isolated,
                suggested_action="Confirm these tokens are consumed directly by platforms, or remove them",
                estimated_effort=Effort.LOW,
            ))

        return recommendations

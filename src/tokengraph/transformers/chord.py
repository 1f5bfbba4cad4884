"""
Chord Data Transformer.

Mode/platform conflict analysis. Unlike the dependency graph, the unit of
comparison here is a mode pair or a platform:

- Mode coupling: how often two modes both move a token away from its
  baseline (first valuesByMode entry).
- Conflict matrix: how many tokens resolve to different values under two
  modes (deep equality via canonical JSON).
- Volatility: how many distinct values a token takes across its entries.
- Platform deviation: how many tokens a platform overrides.

Colors are assigned by cyclic index, so identical input order yields
identical output.
"""

from collections import Counter
from itertools import combinations
from typing import Any, Dict, List, Tuple

from ..config import ChordConfig
from ..core.types import AliasValue, LiteralValue, Mode, Platform, Token, TokenSystem, canonical_json
from .base import BaseTransformer, TransformOptions
from .chord_types import (
    ChordDiagramData,
    ChordLink,
    ChordLinkExample,
    ChordNode,
    ChordNodeType,
    ChordRecommendation,
    ChordStatistics,
    ConflictType,
    CouplingType,
    ModeAnalysis,
    ModeConflictMatrix,
    ModeCoupling,
    OverridePattern,
    PlatformAnalysis,
    PlatformDeviation,
    VolatileToken,
)

MODE_COLORS = ["#3182CE", "#38A169", "#D69E2E", "#E53E3E", "#9F7AEA", "#00B5D8"]
PLATFORM_COLORS = ["#2B6CB0", "#2F855A", "#B7791F", "#C53030", "#805AD5", "#0987A0"]
FALLBACK_COLOR = "#A0AEC0"
FALLBACK_NODE_ID = "tokens-global"

MAX_LINK_EXAMPLES = 3


def mode_color(index: int) -> str:
    return MODE_COLORS[index % len(MODE_COLORS)]


def platform_color(index: int) -> str:
    return PLATFORM_COLORS[index % len(PLATFORM_COLORS)]


def _dump(value: LiteralValue | AliasValue | None) -> Any:
    return value.model_dump(by_alias=True, mode="json") if value is not None else None


class ChordDataTransformer(BaseTransformer[ChordDiagramData]):
    """Builds the ChordDiagramData consumed by the chord view."""

    def __init__(self, config: ChordConfig | None = None):
        super().__init__("ChordDataTransformer")
        self.config = config or ChordConfig()

    def _transform(self, system: TokenSystem, options: TransformOptions) -> ChordDiagramData:
        tokens = system.tokens
        modes = system.modes()
        platforms = system.platforms

        self._logger.debug(
            f"Analyzing {len(tokens)} tokens across {len(modes)} modes and {len(platforms)} platforms"
        )

        couplings = self.compute_mode_couplings(tokens, modes)
        mode_analysis = self.analyze_modes(tokens, modes, couplings)
        platform_analysis = self.analyze_platforms(tokens, platforms)

        if not modes and not platforms:
            self._logger.warning("No modes or platforms found, building single-node chord diagram")
            fallback = ChordNode(
                id=FALLBACK_NODE_ID,
                name="All Tokens",
                type=ChordNodeType.TOKEN_VALUE_GROUP,
                token_ids=[t.id for t in tokens],
                value_count=len(tokens),
                color=FALLBACK_COLOR,
                conflicts=0,
            )
            return ChordDiagramData(
                nodes=[fallback],
                links=[],
                matrix=[[0]],
                mode_analysis=mode_analysis,
                platform_analysis=platform_analysis,
                statistics=self._statistics(tokens, modes, platforms, mode_analysis, platform_analysis),
            )

        nodes = self._build_nodes(tokens, modes, platforms, mode_analysis, platform_analysis)
        links = self._build_mode_links(tokens, couplings)
        if options.include_platform_links:
            links.extend(self._build_platform_links(tokens, modes, platforms))
        matrix = self.build_adjacency_matrix(nodes, links)

        result = ChordDiagramData(
            nodes=nodes,
            links=links,
            matrix=matrix,
            mode_analysis=mode_analysis,
            platform_analysis=platform_analysis,
            statistics=self._statistics(tokens, modes, platforms, mode_analysis, platform_analysis),
        )
        self._logger.info(
            f"Built chord diagram: {len(nodes)} nodes, {len(links)} links, "
            f"{result.statistics.total_conflicts} conflicts"
        )
        return result

    # --- Mode analysis ---

    def compute_mode_couplings(
        self, tokens: List[Token], modes: List[Mode]
    ) -> Dict[Tuple[str, str], ModeCoupling]:
        """Coupling for every unordered mode pair, keyed by (mode_a.id, mode_b.id)."""
        return {
            (a.id, b.id): self.calculate_mode_coupling(tokens, a, b)
            for a, b in combinations(modes, 2)
        }

    def calculate_mode_coupling(self, tokens: List[Token], mode_a: Mode, mode_b: Mode) -> ModeCoupling:
        total = 0
        shared: List[str] = []

        for token in tokens:
            value_a = token.value_for_mode(mode_a.id)
            value_b = token.value_for_mode(mode_b.id)
            base = token.base_value
            if value_a is None or value_b is None or base is None:
                continue

            total += 1
            base_key = base.canonical()
            if value_a.canonical() != base_key and value_b.canonical() != base_key:
                shared.append(token.id)

        strength = len(shared) / total if total else 0.0
        return ModeCoupling(
            mode_ids=[mode_a.id, mode_b.id],
            mode_names=[mode_a.name, mode_b.name],
            coupling_strength=strength,
            shared_token_ids=shared,
            coupling_type=self.classify_coupling(strength),
        )

    def classify_coupling(self, strength: float) -> CouplingType:
        if strength > self.config.always_together_threshold:
            return CouplingType.ALWAYS_TOGETHER
        if strength > self.config.conditional_threshold:
            return CouplingType.CONDITIONAL
        return CouplingType.INVERSE

    def build_conflict_matrix(self, tokens: List[Token], modes: List[Mode]) -> ModeConflictMatrix:
        size = len(modes)
        conflicts = [[0] * size for _ in range(size)]

        for token in tokens:
            values: Dict[str, str] = {}
            for mv in token.values_by_mode:
                for mode_id in mv.mode_ids:
                    values[mode_id] = mv.value.canonical()

            for i, j in combinations(range(size), 2):
                value_a = values.get(modes[i].id)
                value_b = values.get(modes[j].id)
                if value_a is not None and value_b is not None and value_a != value_b:
                    conflicts[i][j] += 1
                    conflicts[j][i] += 1

        return ModeConflictMatrix(mode_ids=[m.id for m in modes], conflicts=conflicts)

    def find_volatile_tokens(self, tokens: List[Token]) -> List[VolatileToken]:
        volatile = []
        for token in tokens:
            counts = Counter(mv.value.canonical() for mv in token.values_by_mode)
            entries = len(token.values_by_mode) or 1
            frequency = (len(counts) - 1) / max(1, entries - 1) if entries > 1 else 0.0
            if frequency <= self.config.volatility_floor:
                continue

            common_key = counts.most_common(1)[0][0]
            common = next(mv.value for mv in token.values_by_mode if mv.value.canonical() == common_key)
            volatile.append(VolatileToken(
                token_id=token.id,
                token_name=token.display_name,
                change_frequency=frequency,
                unique_values=len(counts),
                most_common_value=_dump(common),
                platform_overrides=sum(len(mv.platform_overrides) for mv in token.values_by_mode),
            ))

        volatile = sorted(volatile, key=lambda v: -v.change_frequency)
        return volatile[: self.config.volatile_token_limit]

    def analyze_modes(
        self,
        tokens: List[Token],
        modes: List[Mode],
        couplings: Dict[Tuple[str, str], ModeCoupling],
    ) -> ModeAnalysis:
        significant = [
            c for c in couplings.values()
            if c.coupling_strength > self.config.coupling_significance_threshold
        ]
        return ModeAnalysis(
            total_modes=len(modes),
            mode_couplings=significant,
            conflict_matrix=self.build_conflict_matrix(tokens, modes),
            most_volatile_tokens=self.find_volatile_tokens(tokens),
        )

    # --- Platform analysis ---

    def calculate_platform_deviation(self, tokens: List[Token], platform: Platform) -> PlatformDeviation:
        affected: List[str] = []
        unique_overrides = 0
        inherited = 0

        for token in tokens:
            touched = False
            for mv in token.values_by_mode:
                override = mv.override_for(platform.id)
                if override is None:
                    inherited += 1
                    continue
                touched = True
                if isinstance(mv.value, AliasValue) or override.canonical() != canonical_json(mv.value.value):
                    unique_overrides += 1
            if touched:
                affected.append(token.id)

        return PlatformDeviation(
            platform_id=platform.id,
            platform_name=platform.display_name,
            deviation_score=len(affected) / len(tokens) if tokens else 0.0,
            affected_token_ids=affected,
            unique_overrides=unique_overrides,
            inherited_values=inherited,
        )

    def find_override_patterns(self, tokens: List[Token], platforms: List[Platform]) -> List[OverridePattern]:
        """Group tokens by the exact set of platforms that override them."""
        names = {p.id: p.display_name for p in platforms}
        groups: Dict[Tuple[str, ...], List[str]] = {}
        for token in tokens:
            overriding = sorted({
                o.platform_id for mv in token.values_by_mode for o in mv.platform_overrides
            })
            if overriding:
                groups.setdefault(tuple(overriding), []).append(token.id)

        patterns = []
        for platform_ids, token_ids in groups.items():
            if len(platform_ids) == 1:
                complexity = "low"
            elif len(platform_ids) == 2:
                complexity = "medium"
            else:
                complexity = "high"
            labels = ", ".join(names.get(pid, pid) for pid in platform_ids)
            patterns.append(OverridePattern(
                pattern="+".join(platform_ids),
                token_ids=token_ids,
                frequency=len(token_ids) / len(tokens),
                complexity=complexity,
                description=f"{len(token_ids)} tokens overridden on {labels}",
            ))
        return patterns

    def analyze_platforms(self, tokens: List[Token], platforms: List[Platform]) -> PlatformAnalysis:
        deviations = [self.calculate_platform_deviation(tokens, p) for p in platforms]
        return PlatformAnalysis(
            total_platforms=len(platforms),
            platform_deviations=deviations,
            override_patterns=self.find_override_patterns(tokens, platforms),
            complexity_score=(
                sum(d.deviation_score for d in deviations) / len(deviations) if deviations else 0.0
            ),
        )

    # --- Chord assembly ---

    def _build_nodes(
        self,
        tokens: List[Token],
        modes: List[Mode],
        platforms: List[Platform],
        mode_analysis: ModeAnalysis,
        platform_analysis: PlatformAnalysis,
    ) -> List[ChordNode]:
        nodes = []
        conflicts = mode_analysis.conflict_matrix.conflicts

        for index, mode in enumerate(modes):
            in_mode = [
                t.id for t in tokens
                if any(mode.id in mv.mode_ids for mv in t.values_by_mode)
            ]
            nodes.append(ChordNode(
                id=f"mode-{mode.id}",
                name=mode.name,
                type=ChordNodeType.MODE,
                mode_id=mode.id,
                token_ids=in_mode,
                value_count=len(in_mode),
                color=mode_color(index),
                conflicts=sum(conflicts[index]),
            ))

        deviations = {d.platform_id: d for d in platform_analysis.platform_deviations}
        for index, platform in enumerate(platforms):
            deviation = deviations.get(platform.id)
            nodes.append(ChordNode(
                id=f"platform-{platform.id}",
                name=platform.display_name,
                type=ChordNodeType.PLATFORM,
                platform_id=platform.id,
                token_ids=list(deviation.affected_token_ids) if deviation else [],
                value_count=deviation.unique_overrides if deviation else 0,
                color=platform_color(index),
                conflicts=round((deviation.deviation_score if deviation else 0) * 100),
            ))

        return nodes

    def _build_mode_links(
        self, tokens: List[Token], couplings: Dict[Tuple[str, str], ModeCoupling]
    ) -> List[ChordLink]:
        by_id = {t.id: t for t in tokens}
        links = []
        for (mode_a, mode_b), coupling in couplings.items():
            if coupling.coupling_strength <= self.config.coupling_link_threshold:
                continue

            examples = []
            for token_id in coupling.shared_token_ids[:MAX_LINK_EXAMPLES]:
                token = by_id[token_id]
                examples.append(ChordLinkExample(
                    token_id=token.id,
                    token_name=token.display_name,
                    source_value=_dump(token.value_for_mode(mode_a)),
                    target_value=_dump(token.value_for_mode(mode_b)),
                    change_type="transformation",
                ))

            links.append(ChordLink(
                source=f"mode-{mode_a}",
                target=f"mode-{mode_b}",
                value=coupling.coupling_strength * 100,
                conflict_type=ConflictType.MODE_COUPLING,
                token_ids=list(coupling.shared_token_ids),
                examples=examples,
            ))
        return links

    def _build_platform_links(
        self, tokens: List[Token], modes: List[Mode], platforms: List[Platform]
    ) -> List[ChordLink]:
        """Platform <-> mode links weighted by the share of tokens the platform overrides in that mode."""
        if not tokens:
            return []

        links = []
        for platform in platforms:
            for mode in modes:
                token_ids: List[str] = []
                examples: List[ChordLinkExample] = []
                for token in tokens:
                    entry = next((mv for mv in token.values_by_mode if mode.id in mv.mode_ids), None)
                    override = entry.override_for(platform.id) if entry else None
                    if override is None:
                        continue
                    token_ids.append(token.id)
                    if len(examples) < MAX_LINK_EXAMPLES:
                        examples.append(ChordLinkExample(
                            token_id=token.id,
                            token_name=token.display_name,
                            source_value=_dump(entry.value),
                            target_value=override.value,
                            change_type="override",
                        ))
                if not token_ids:
                    continue
                links.append(ChordLink(
                    source=f"platform-{platform.id}",
                    target=f"mode-{mode.id}",
                    value=len(token_ids) / len(tokens) * 100,
                    conflict_type=ConflictType.PLATFORM_OVERRIDE,
                    token_ids=token_ids,
                    examples=examples,
                ))
        return links

    @staticmethod
    def build_adjacency_matrix(nodes: List[ChordNode], links: List[ChordLink]) -> List[List[float]]:
        """Symmetric matrix in node order; unlinked nodes keep a row of zeros."""
        index: Dict[str, int] = {node.id: i for i, node in enumerate(nodes)}
        matrix: List[List[float]] = [[0] * len(nodes) for _ in nodes]

        for link in links:
            source = index.get(link.source)
            target = index.get(link.target)
            if source is None or target is None:
                continue
            matrix[source][target] = link.value
            matrix[target][source] = link.value

        return matrix

    def _statistics(
        self,
        tokens: List[Token],
        modes: List[Mode],
        platforms: List[Platform],
        mode_analysis: ModeAnalysis,
        platform_analysis: PlatformAnalysis,
    ) -> ChordStatistics:
        # Each conflict is counted twice in the symmetric matrix
        total_conflicts = sum(sum(row) for row in mode_analysis.conflict_matrix.conflicts) // 2
        couplings = mode_analysis.mode_couplings

        return ChordStatistics(
            total_tokens=len(tokens),
            total_modes=len(modes),
            total_platforms=len(platforms),
            total_conflicts=total_conflicts,
            avg_conflicts_per_token=total_conflicts / len(tokens) if tokens else 0.0,
            max_conflicts_per_token=max(
                (v.unique_values for v in mode_analysis.most_volatile_tokens), default=0
            ),
            mode_coupling_score=(
                sum(c.coupling_strength for c in couplings) / len(couplings) if couplings else 0.0
            ),
            platform_complexity_score=platform_analysis.complexity_score,
            recommendations=self._recommendations(modes, mode_analysis, platform_analysis, len(tokens)),
        )

    def _recommendations(
        self,
        modes: List[Mode],
        mode_analysis: ModeAnalysis,
        platform_analysis: PlatformAnalysis,
        token_count: int,
    ) -> List[ChordRecommendation]:
        recommendations = []
        couplings = mode_analysis.mode_couplings

        if couplings and len(couplings) > len(modes) * 0.3:
            recommendations.append(ChordRecommendation(
                type="coupling-reduction",
                severity="warning",
                title="High Mode Coupling Detected",
                description=(
                    f"{len(couplings)} strong mode couplings found, indicating potential over-complexity"
                ),
                affected_items=[name for c in couplings for name in c.mode_names],
                estimated_impact="medium",
                suggested_action="Consider consolidating highly coupled modes or restructuring token values",
            ))

        idle = [
            d.platform_name for d in platform_analysis.platform_deviations if not d.affected_token_ids
        ]
        if idle and token_count:
            recommendations.append(ChordRecommendation(
                type="platform-consolidation",
                severity="info",
                title="Platforms Without Overrides",
                description=f"{len(idle)} platforms inherit every core value",
                affected_items=idle,
                estimated_impact="low",
                suggested_action="Consider whether these platforms need separate extension documents",
            ))

        return recommendations

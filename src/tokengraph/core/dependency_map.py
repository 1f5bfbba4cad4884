"""
Dependency map construction.

Scans every token once and records, for each alias, a forward edge
(token -> referenced token) and a reverse edge (referenced -> token).
Targets that do not exist are kept; existence is checked by validation.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Set, Tuple

import networkx as nx

from .exceptions import InvalidTokenSystemError
from .types import Token

logger = logging.getLogger(__name__)

_EMPTY: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DependencyMaps:
    """
    Forward and reverse alias maps.

    Every token has a forward entry, possibly empty. Reverse entries exist
    only for ids that are referenced at least once. Each id tuple is sorted,
    so two maps built from the same tokens in any order compare equal.
    """

    forward: Mapping[str, Tuple[str, ...]]
    reverse: Mapping[str, Tuple[str, ...]]

    def dependencies_of(self, token_id: str) -> Tuple[str, ...]:
        return self.forward.get(token_id, _EMPTY)

    def dependents_of(self, token_id: str) -> Tuple[str, ...]:
        return self.reverse.get(token_id, _EMPTY)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.forward.values())

    def to_networkx(self) -> nx.DiGraph:
        """Forward graph: an edge A -> B means A aliases B."""
        graph = nx.DiGraph()
        graph.add_nodes_from(self.forward)
        for source, targets in self.forward.items():
            for target in targets:
                graph.add_edge(source, target)
        return graph

    def to_reverse_networkx(self) -> nx.DiGraph:
        """Reverse graph: an edge B -> A means a change to B reaches A."""
        return self.to_networkx().reverse(copy=True)


def build_dependency_maps(tokens: Iterable[Token]) -> DependencyMaps:
    """Build forward and reverse maps from a token collection."""
    if tokens is None:
        raise InvalidTokenSystemError("Token collection is missing")

    forward: Dict[str, Set[str]] = {}
    reverse: Dict[str, Set[str]] = defaultdict(set)

    for token in tokens:
        deps = forward.setdefault(token.id, set())
        for target in token.alias_targets():
            deps.add(target)
            reverse[target].add(token.id)

    maps = DependencyMaps(
        forward=MappingProxyType({k: tuple(sorted(v)) for k, v in forward.items()}),
        reverse=MappingProxyType({k: tuple(sorted(v)) for k, v in reverse.items()}),
    )

    logger.debug(
        f"Built dependency maps: {len(maps.forward)} tokens, "
        f"{len(maps.reverse)} referenced ids, {maps.edge_count} edges"
    )
    return maps

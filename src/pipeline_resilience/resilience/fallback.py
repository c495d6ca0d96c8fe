"""
Fallback resolver: next model in a configured chain.

The chain table is copied into an immutable mapping at construction, so
lookups are idempotent. The caller tracks how many fallbacks it has already
tried; the resolver keeps no counters.
"""

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Optional


class FallbackResolver:
    """
    Read-only lookup over model fallback chains.

    Attributes:
        chains: Immutable mapping of model id -> ordered alternate model ids
    """

    def __init__(self, chains: Mapping[str, Sequence[str]]):
        self.chains: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {model_id: tuple(alternates) for model_id, alternates in chains.items()}
        )

    def chain_for(self, model_id: str) -> tuple[str, ...]:
        """Full ordered chain for a model (empty when none is configured)."""
        return self.chains.get(model_id, ())

    def next_fallback(self, model_id: str, tried_count: int = 0) -> Optional[str]:
        """
        Fallback at position `tried_count` in the model's chain.

        Args:
            model_id: Model that just failed
            tried_count: Number of fallbacks the caller has already tried

        Returns:
            Model id, or None when the chain is undefined or too short
        """
        chain = self.chain_for(model_id)
        if tried_count < 0 or tried_count >= len(chain):
            return None
        return chain[tried_count]

    def find_cycles(self, max_depth: int) -> list[tuple[str, ...]]:
        """
        Paths that lead back to their starting model within `max_depth` hops.

        Any entry of a chain counts as a hop, since a caller switching to a
        fallback model will consult that model's own chain on its next
        failure. Cycles are reported, not prevented: keeping chains acyclic
        is a configuration concern.

        Returns:
            First cycle found per starting model, e.g.
            ("gpt-4o", "claude-sonnet-4-20250514", "gpt-4o")
        """
        cycles: list[tuple[str, ...]] = []
        for start in sorted(self.chains):
            cycle = self._cycle_from(start, (start,), max_depth)
            if cycle is not None:
                cycles.append(cycle)
        return cycles

    def _cycle_from(
        self, start: str, path: tuple[str, ...], depth_left: int
    ) -> Optional[tuple[str, ...]]:
        if depth_left <= 0:
            return None
        for alternate in self.chain_for(path[-1]):
            if alternate == start:
                return path + (alternate,)
            if alternate in path:
                continue
            found = self._cycle_from(start, path + (alternate,), depth_left - 1)
            if found is not None:
                return found
        return None

"""
Pool Prefilters
===============

Optional narrowing of the candidate pool before the greedy walk.

Restricting the walk to the k frames globally closest to the initial
frame bounds its cost (each step scans every remaining candidate)
without changing how it chooses.
"""

import logging
from typing import List, Protocol

from framewalk.models.frame import CanonicalFrame
from framewalk.selection.metrics import DistanceMetric


logger = logging.getLogger(__name__)


class PoolFilter(Protocol):
    """Protocol for pool prefilter strategies."""

    def apply(
        self,
        initial: CanonicalFrame,
        pool: List[CanonicalFrame],
        metric: DistanceMetric,
    ) -> List[CanonicalFrame]:
        """
        Return the candidates the walk should consider, in pool order.

        Args:
            initial: Reference frame of the run
            pool: All canonical candidates
            metric: Distance metric of the run
        """
        ...


class NoPrefilter:
    """Keep every candidate."""

    def apply(
        self,
        initial: CanonicalFrame,
        pool: List[CanonicalFrame],
        metric: DistanceMetric,
    ) -> List[CanonicalFrame]:
        return list(pool)


class GlobalNearestPrefilter:
    """
    Keep the k candidates closest to the initial frame.

    Ties on distance keep pool order. Survivors stay in their original
    pool order so the walk's tie-break is unchanged.

    Attributes:
        k: Maximum number of candidates kept
    """

    def __init__(self, k: int) -> None:
        if k < 1:
            raise ValueError(f"prefilter k must be >= 1, got {k}")
        self.k = k

    def apply(
        self,
        initial: CanonicalFrame,
        pool: List[CanonicalFrame],
        metric: DistanceMetric,
    ) -> List[CanonicalFrame]:
        if len(pool) <= self.k:
            return list(pool)

        distances = [metric.distance(candidate, initial) for candidate in pool]
        # sorted() is stable, so equal distances keep pool order
        ranked = sorted(range(len(pool)), key=lambda i: distances[i])
        keep = sorted(ranked[: self.k])

        logger.info(f"Prefilter kept {len(keep)} of {len(pool)} candidates")
        return [pool[i] for i in keep]


def make_prefilter(k: int) -> PoolFilter:
    """Build the prefilter for a configured k (0 disables it)."""
    if k == 0:
        return NoPrefilter()
    return GlobalNearestPrefilter(k)

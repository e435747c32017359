"""
Frame Selector
==============

Greedy nearest-neighbor walk with a global anchor.

Given the initial frame and a pool of canonical candidates, builds an
ordered sequence of at most `cap` frames that stays close to the initial
frame and avoids abrupt jumps between consecutive frames.

Algorithm:
    1. Seed the output with `leading_copies` copies of the initial frame
       (at least one).
    2. Until the output holds `cap` frames or the pool is empty:
         score(c) = w_local * d(c, last) + w_global * d(c, initial)
       take the lowest score (first in pool order on ties) out of the pool.
       If d(c, last) == 0 drop it, otherwise append it.

Key Design Decisions:
    - The global term keeps the walk from drifting away from the subject
    - Dropping zero-local-distance winners removes static runs without
      spending an output slot
    - Global distances are computed once per candidate, the initial
      frame never changes during a run
"""

import logging
from typing import Iterable, List, NamedTuple, Optional

from framewalk.models.frame import CanonicalFrame
from framewalk.models.selection import SelectionResult, SelectionState, SelectionWeights
from framewalk.selection.metrics import DistanceMetric, SquaredErrorMetric
from framewalk.selection.prefilter import NoPrefilter, PoolFilter


logger = logging.getLogger(__name__)


class CandidateScore(NamedTuple):
    """Score of one candidate plus the distances it was built from."""

    score: float
    local: int
    global_: int


def weighted_score(local: int, global_: int, weights: SelectionWeights) -> float:
    """Combine local and global distances into one score."""
    return weights.local * local + weights.global_ * global_


def score_candidate(
    candidate: CanonicalFrame,
    last_chosen: CanonicalFrame,
    initial: CanonicalFrame,
    weights: SelectionWeights,
    metric: DistanceMetric,
    global_distance: Optional[int] = None,
) -> CandidateScore:
    """
    Score a candidate against the previous output frame and the initial frame.

    Pure function: no state beyond its arguments. The walk passes
    `global_distance` from its per-run cache, it must equal
    metric.distance(candidate, initial).

    Args:
        candidate: Frame being considered
        last_chosen: Most recently appended output frame
        initial: Reference frame of the run
        weights: Local/global weights
        metric: Distance metric
        global_distance: Precomputed distance to the initial frame, if known

    Returns:
        CandidateScore(score, local, global_)
    """
    local = metric.distance(candidate, last_chosen)
    if global_distance is None:
        global_ = metric.distance(candidate, initial)
    else:
        global_ = global_distance
    return CandidateScore(weighted_score(local, global_, weights), local, global_)


class FrameSelector:
    """
    Greedy frame sequencer.

    Attributes:
        cap: Maximum number of output frames
        leading_copies: Copies of the initial frame at the start (0 acts as 1)
        weights: Local/global score weights
        metric: Distance metric
        prefilter: Pool narrowing applied before the walk
    """

    def __init__(
        self,
        cap: int,
        leading_copies: int = 1,
        weights: Optional[SelectionWeights] = None,
        metric: Optional[DistanceMetric] = None,
        prefilter: Optional[PoolFilter] = None,
    ) -> None:
        """
        Initialize the selector.

        Raises:
            ValueError: If cap < 1 or leading_copies < 0
        """
        if cap < 1:
            raise ValueError(f"cap must be >= 1, got {cap}")
        if leading_copies < 0:
            raise ValueError(f"leading_copies must be >= 0, got {leading_copies}")

        self.cap = cap
        self.leading_copies = leading_copies
        self.weights = weights or SelectionWeights()
        self.metric = metric or SquaredErrorMetric()
        self.prefilter = prefilter or NoPrefilter()

        logger.debug(
            f"FrameSelector initialized: cap={cap}, leading_copies={leading_copies}, "
            f"weights=({self.weights.local}, {self.weights.global_}), "
            f"metric={self.metric.name}"
        )

    def select(
        self,
        initial: CanonicalFrame,
        pool: Iterable[CanonicalFrame],
    ) -> SelectionResult:
        """
        Order a subset of the pool into the output sequence.

        Args:
            initial: Reference frame, repeated at the start of the output
            pool: Canonical candidates in pool order (consumed, not mutated)

        Returns:
            SelectionResult with at most `cap` frames
        """
        seed = min(max(self.leading_copies, 1), self.cap)
        candidates = self.prefilter.apply(initial, list(pool), self.metric)

        state = SelectionState(chosen=[initial] * seed, remaining=candidates)
        global_distances: List[int] = [
            self.metric.distance(candidate, initial) for candidate in candidates
        ]

        while len(state.chosen) < self.cap and state.remaining:
            last = state.last
            best_index = -1
            best: Optional[CandidateScore] = None

            for index, candidate in enumerate(state.remaining):
                scored = score_candidate(
                    candidate,
                    last,
                    initial,
                    self.weights,
                    self.metric,
                    global_distance=global_distances[index],
                )
                # Strict comparison: the first of equal scores wins
                if best is None or scored.score < best.score:
                    best_index = index
                    best = scored

            winner = state.take(best_index)
            global_distances.pop(best_index)

            if best.local == 0:
                state.discarded += 1
                logger.debug(f"Dropped {winner.identity}: identical to previous frame")
                continue

            state.chosen.append(winner)
            logger.debug(
                f"Selected {winner.identity} [{len(state.chosen)}/{self.cap}]: "
                f"score={best.score}, local={best.local}, global={best.global_}"
            )

        result = SelectionResult(
            frames=tuple(state.chosen),
            leading_copies=seed,
            candidates=len(candidates),
            discarded=state.discarded,
            unused=len(state.remaining),
        )
        logger.info(f"Selection complete: {result.to_dict()}")
        return result


def select(
    initial: CanonicalFrame,
    pool: Iterable[CanonicalFrame],
    cap: int,
    leading_copies: int = 1,
    weights: Optional[SelectionWeights] = None,
    metric: Optional[DistanceMetric] = None,
    prefilter: Optional[PoolFilter] = None,
) -> List[CanonicalFrame]:
    """
    Convenience wrapper returning only the ordered frames.

    See FrameSelector for the parameters.
    """
    selector = FrameSelector(
        cap=cap,
        leading_copies=leading_copies,
        weights=weights,
        metric=metric,
        prefilter=prefilter,
    )
    return list(selector.select(initial, pool).frames)

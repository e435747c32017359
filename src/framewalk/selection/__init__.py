"""
Selection Module
================

Frame sequencing for the output animation.

This module provides:
    - Distance metrics (squared error, Hamming)
    - Pool prefilters (none, k globally nearest)
    - The greedy frame selector

Only relative distances matter. No perceptual metrics.
"""

from framewalk.selection.metrics import (
    DistanceMetric,
    HammingMetric,
    SquaredErrorMetric,
    available_metrics,
    get_metric,
)
from framewalk.selection.prefilter import (
    GlobalNearestPrefilter,
    NoPrefilter,
    PoolFilter,
    make_prefilter,
)
from framewalk.selection.selector import (
    CandidateScore,
    FrameSelector,
    score_candidate,
    select,
    weighted_score,
)

__all__ = [
    # Metrics
    "DistanceMetric",
    "SquaredErrorMetric",
    "HammingMetric",
    "available_metrics",
    "get_metric",
    # Prefilters
    "PoolFilter",
    "NoPrefilter",
    "GlobalNearestPrefilter",
    "make_prefilter",
    # Selector
    "CandidateScore",
    "FrameSelector",
    "score_candidate",
    "select",
    "weighted_score",
]

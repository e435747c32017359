"""
Selection Models
================

Data models owned by the frame selector during one run.

These models carry the greedy walk's working state and its outcome.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from framewalk.models.frame import CanonicalFrame


@dataclass(frozen=True, slots=True)
class SelectionWeights:
    """
    Weights of the two distance terms in a candidate's score.

    score = local * distance(candidate, last_chosen)
          + global_ * distance(candidate, initial)

    Attributes:
        local: Weight of the distance to the previously chosen frame
        global_: Weight of the distance to the initial frame
    """

    local: float = 1.0
    global_: float = 1.0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not math.isfinite(self.local) or self.local < 0:
            raise ValueError(f"local weight must be finite and non-negative, got {self.local}")
        if not math.isfinite(self.global_) or self.global_ < 0:
            raise ValueError(f"global weight must be finite and non-negative, got {self.global_}")


@dataclass
class SelectionState:
    """
    Working state of one greedy walk.

    A frame lives in exactly one of `chosen` or `remaining`, or has been
    discarded. `remaining` only shrinks.

    Attributes:
        chosen: Ordered output so far, starting with the leading copies
        remaining: Candidates not yet taken, in pool order
        discarded: Number of candidates dropped as duplicates of their predecessor
    """

    chosen: List[CanonicalFrame] = field(default_factory=list)
    remaining: List[CanonicalFrame] = field(default_factory=list)
    discarded: int = 0

    @property
    def last(self) -> CanonicalFrame:
        """Most recently chosen frame."""
        return self.chosen[-1]

    def take(self, index: int) -> CanonicalFrame:
        """Move the candidate at `index` out of the remaining pool."""
        return self.remaining.pop(index)


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """
    Outcome of a selection run.

    Attributes:
        frames: Ordered output sequence (leading copies first)
        leading_copies: Number of copies of the initial frame at the start
        candidates: Pool size after prefiltering
        discarded: Candidates dropped for zero local distance
        unused: Candidates never reached before the cap was hit
    """

    frames: Tuple[CanonicalFrame, ...]
    leading_copies: int
    candidates: int
    discarded: int
    unused: int

    def __len__(self) -> int:
        return len(self.frames)

    def to_dict(self) -> dict:
        """Export counts for logging."""
        return {
            "frames": len(self.frames),
            "leading_copies": self.leading_copies,
            "candidates": self.candidates,
            "discarded": self.discarded,
            "unused": self.unused,
        }

"""
FrameWalk Pipeline
==================

Orchestrates one run from input directory to animated GIF.

Stages:
    1. Load the reference frame (fatal on failure)
    2. Enumerate and decode the input directory
    3. Canonicalize every candidate to the reference dimensions
    4. Select and order frames (greedy walk)
    5. Build the grayscale palette once
    6. Write the looping GIF (fatal on failure)

Per-candidate failures in stages 2-3 are logged, counted and skipped.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from framewalk.config import RunConfig, Settings
from framewalk.errors import (
    ImageDecodeError,
    MissingReferenceFrameError,
    UnsupportedFormatError,
)
from framewalk.imaging.canonicalize import canonicalize
from framewalk.imaging.decoder import decode_file
from framewalk.imaging.palette import grayscale_palette
from framewalk.models.frame import CanonicalFrame, PixelFormat
from framewalk.models.selection import SelectionResult, SelectionWeights
from framewalk.output.gif_writer import GifContainerWriter
from framewalk.selection.metrics import get_metric
from framewalk.selection.prefilter import make_prefilter
from framewalk.selection.selector import FrameSelector
from framewalk.sources import iter_sources


logger = logging.getLogger(__name__)


@dataclass
class PoolReport:
    """
    Outcome of pool construction.

    Attributes:
        scanned: Files enumerated (reference excluded)
        accepted: Candidates added to the pool
        rejected: Dropped candidates, counted by reason
    """

    scanned: int = 0
    accepted: int = 0
    rejected: Dict[str, int] = field(default_factory=dict)

    def reject(self, reason: str) -> None:
        self.rejected[reason] = self.rejected.get(reason, 0) + 1

    @property
    def rejected_total(self) -> int:
        return sum(self.rejected.values())

    def to_dict(self) -> dict:
        """Export as dictionary for logging."""
        return {
            "scanned": self.scanned,
            "accepted": self.accepted,
            "rejected": dict(self.rejected),
        }


@dataclass(frozen=True, slots=True)
class RunReport:
    """Summary of a completed run."""

    output_path: Path
    width: int
    height: int
    pool: PoolReport
    selection: SelectionResult

    def to_dict(self) -> dict:
        """Export as dictionary for logging."""
        return {
            "output": str(self.output_path),
            "size": f"{self.width}x{self.height}",
            "pool": self.pool.to_dict(),
            "selection": self.selection.to_dict(),
        }


def load_reference(path: Path, force_grayscale: bool = True) -> CanonicalFrame:
    """
    Decode the reference frame.

    Its dimensions define the run, so it is canonical by definition.

    Raises:
        MissingReferenceFrameError: If it cannot be decoded or is not grayscale
    """
    try:
        frame = decode_file(path, force_grayscale=force_grayscale)
    except ImageDecodeError as e:
        raise MissingReferenceFrameError(f"Reference frame unusable: {e}") from e

    if frame.pixel_format != PixelFormat.GRAYSCALE8:
        raise MissingReferenceFrameError(
            f"Reference frame {path} is {frame.pixel_format.value}; "
            f"grayscale output needs a GRAYSCALE8 reference"
        )

    logger.info(f"Reference frame {path}: {frame.width}x{frame.height}")
    return CanonicalFrame.wrap(frame)


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return False


def build_pool(
    paths: Iterable[Path],
    reference: CanonicalFrame,
    force_grayscale: bool = True,
    reference_path: Optional[Path] = None,
) -> Tuple[List[CanonicalFrame], PoolReport]:
    """
    Decode and canonicalize candidates against the reference frame.

    Args:
        paths: Candidate files in pool order
        reference: Reference frame (target dimensions)
        force_grayscale: Decode option passed to the decoder
        reference_path: Reference file, skipped if it appears in `paths`

    Returns:
        (pool, report): canonical GRAYSCALE8 candidates in input order
    """
    pool: List[CanonicalFrame] = []
    report = PoolReport()

    for path in paths:
        if reference_path is not None and _same_file(path, reference_path):
            logger.debug(f"Skipping reference file {path} in input directory")
            continue

        report.scanned += 1

        try:
            frame = decode_file(path, force_grayscale=force_grayscale)
        except ImageDecodeError as e:
            logger.warning(f"Dropping candidate: {e}")
            report.reject("decode_error")
            continue

        try:
            canonical = canonicalize(frame, reference.width, reference.height)
        except UnsupportedFormatError as e:
            logger.warning(f"Dropping candidate: {e}")
            report.reject("unsupported_format")
            continue

        # The fast path keeps the native format of same-sized frames
        if canonical.pixel_format != PixelFormat.GRAYSCALE8:
            logger.warning(
                f"Dropping candidate {path}: format "
                f"{canonical.pixel_format.value} cannot be measured"
            )
            report.reject("unsupported_format")
            continue

        pool.append(canonical)
        report.accepted += 1

    logger.info(f"Pool built: {report.to_dict()}")
    return pool, report


def run(run_config: RunConfig, settings: Settings) -> RunReport:
    """
    Execute one run.

    Args:
        run_config: Paths and selection parameters
        settings: Remaining settings (metric, prefilter, decode, output)

    Returns:
        RunReport describing the written GIF

    Raises:
        MissingReferenceFrameError: Reference frame unusable
        SourceError: Input directory unreadable
        EncodeError: Output could not be written
    """
    force_grayscale = settings.decode.force_grayscale

    reference = load_reference(run_config.reference_path, force_grayscale)

    paths = iter_sources(run_config.input_dir, settings.decode.extensions)
    pool, pool_report = build_pool(
        paths,
        reference,
        force_grayscale=force_grayscale,
        reference_path=run_config.reference_path,
    )

    selector = FrameSelector(
        cap=run_config.max_frames,
        leading_copies=run_config.leading_copies,
        weights=SelectionWeights(
            local=run_config.weight_local,
            global_=run_config.weight_global,
        ),
        metric=get_metric(settings.selection.metric),
        prefilter=make_prefilter(settings.selection.prefilter_k),
    )
    selection = selector.select(reference, pool)

    palette = grayscale_palette()
    writer = GifContainerWriter(
        run_config.output_path,
        frame_duration_ms=settings.output.frame_duration_ms,
    )
    with writer.begin(reference.width, reference.height, palette) as encoder:
        for frame in selection.frames:
            encoder.write_frame(frame.to_bytes())

    report = RunReport(
        output_path=run_config.output_path,
        width=reference.width,
        height=reference.height,
        pool=pool_report,
        selection=selection,
    )
    logger.info(f"Run complete: {report.to_dict()}")
    return report

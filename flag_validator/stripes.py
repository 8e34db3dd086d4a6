"""
Stripe classification: label every row by its nearest stripe color, run-length
encode the labels and resolve the top/middle/bottom bands.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .buffer import PixelBuffer
from .colors import nearest_label
from .config import DEFAULT_SPEC, TargetSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Band:
    """Inclusive row range [start, end]."""
    start: int
    end: int

    @property
    def rows(self) -> int:
        return max(0, self.end - self.start + 1)

    @property
    def mid_y(self) -> float:
        return (self.start + self.end) / 2.0


@dataclass(frozen=True)
class StripeRun:
    label: str
    first: int
    last: int

    @property
    def rows(self) -> int:
        return self.last - self.first + 1


@dataclass(frozen=True)
class BandAssignment:
    top: Band
    middle: Band
    bottom: Band
    runs: Tuple[StripeRun, ...]
    fractions: Tuple[float, float, float]    # top, middle, bottom share of H
    fallback: bool = False


def row_labels(buffer: PixelBuffer, spec: TargetSpec = DEFAULT_SPEC) -> np.ndarray:
    """Label each row by the stripe color nearest to its full-width mean RGB."""
    means = buffer.region().mean(axis=1)
    return nearest_label(means, spec.stripe_palette)


def run_length(labels: np.ndarray) -> List[StripeRun]:
    """Collapse consecutive identical labels into runs covering every row."""
    H = len(labels)
    if H == 0:
        return []
    change = np.flatnonzero(labels[1:] != labels[:-1]) + 1
    starts = [0] + change.tolist()
    ends = change.tolist() + [H]
    return [StripeRun(str(labels[s]), s, e - 1) for s, e in zip(starts, ends)]


def _first_run(runs: List[StripeRun], label: str, after: int) -> Optional[StripeRun]:
    for run in runs:
        if run.label == label and run.first > after:
            return run
    return None


def equal_thirds(height: int) -> Tuple[Band, Band, Band]:
    t1, t2 = height // 3, (2 * height) // 3
    return Band(0, t1 - 1), Band(t1, t2 - 1), Band(t2, height - 1)


def classify(buffer: PixelBuffer, spec: TargetSpec = DEFAULT_SPEC) -> BandAssignment:
    """Resolve the saffron/white/green bands of the flag.

    Looks for the first saffron run, then the first white run after it, then
    the first green run after that. If any is missing the image is split into
    equal thirds instead; that fallback reports exactly 1/3 per band, which is
    lenient (noisy images can pass the proportion rule) but kept on purpose.
    """
    H = buffer.height
    runs = run_length(row_labels(buffer, spec))

    top = _first_run(runs, "saffron", -1)
    mid = _first_run(runs, "white", top.last if top else -1)
    bot = _first_run(runs, "green", mid.last) if mid else None

    if top and mid and bot:
        bands = (Band(0, top.last), Band(top.last + 1, mid.last), Band(mid.last + 1, H - 1))
        fractions = (top.rows / H, mid.rows / H, bot.rows / H)
        fallback = False
    else:
        logger.warning("saffron/white/green run order not found in %d runs, using equal thirds", len(runs))
        bands = equal_thirds(H)
        fractions = (1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0)
        fallback = True

    logger.debug("bands top=%s middle=%s bottom=%s fractions=%s", *bands, fractions)
    return BandAssignment(*bands, runs=tuple(runs), fractions=fractions, fallback=fallback)

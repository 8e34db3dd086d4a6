"""
Ashoka Chakra detection inside the white band.

Matches chakra-blue pixels in the band, fits a bounding circle around their
centroid and estimates the spoke count from an angular histogram of the
matched pixels around that centroid.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .buffer import PixelBuffer
from .config import DEFAULT_SPEC, Color, TargetSpec
from .errors import InsufficientChakraSignalError
from .stripes import Band

logger = logging.getLogger(__name__)

HIST_BINS = 720         # 0.5° bins
SMOOTH_HALF_WIDTH = 5   # moving-average window of 11 bins
PEAK_FRACTION = 0.5     # of the max smoothed bin


@dataclass(frozen=True)
class ChakraMetrics:
    present: bool
    target_diameter: float
    pixel_count: int = 0
    reason: Optional[str] = None
    centroid: Optional[Tuple[float, float]] = None
    offset: Optional[Tuple[float, float]] = None
    radius: Optional[float] = None
    diameter: Optional[float] = None
    diameter_deviation: Optional[float] = None
    spoke_estimate: Optional[int] = None
    peak_count: Optional[int] = None
    mean_color: Optional[Color] = None


def chakra_pixels(buffer: PixelBuffer, band: Band, spec: TargetSpec = DEFAULT_SPEC):
    """Image coordinates (xs, ys) and RGB values of matched pixels.

    Raises InsufficientChakraSignalError when fewer than
    ``spec.chakra_min_pixels`` qualify.
    """
    rgb = buffer.rows(band.start, band.end)
    dev = np.abs(rgb - np.asarray(spec.chakra_blue, dtype=np.float64)) / 255.0
    mask = (dev <= spec.color_tolerance_pct / 100.0).all(axis=2)
    ys, xs = np.nonzero(mask)
    if len(xs) < max(1, spec.chakra_min_pixels):
        raise InsufficientChakraSignalError(len(xs), spec.chakra_min_pixels)
    return xs.astype(np.float64), ys.astype(np.float64) + band.start, rgb[mask]


def angular_histogram(xs: np.ndarray, ys: np.ndarray, cx: float, cy: float,
                      bins: int = HIST_BINS) -> np.ndarray:
    """Pixel counts per angle bin around (cx, cy); angles in [0, 2π)."""
    ang = np.mod(np.arctan2(ys - cy, xs - cx), 2.0 * np.pi)
    idx = np.floor(ang / (2.0 * np.pi) * bins).astype(np.int64) % bins
    return np.bincount(idx, minlength=bins).astype(np.float64)


def smooth_circular(hist: np.ndarray, half_width: int = SMOOTH_HALF_WIDTH) -> np.ndarray:
    """Centered moving average with wraparound."""
    acc = np.zeros_like(hist)
    for k in range(-half_width, half_width + 1):
        acc += np.roll(hist, -k)
    return acc / (2 * half_width + 1)


def count_peaks(smooth: np.ndarray, threshold: float) -> int:
    """Strict local maxima above threshold (diagnostics only)."""
    prev = np.roll(smooth, 1)
    nxt = np.roll(smooth, -1)
    return int(((smooth > threshold) & (smooth > prev) & (smooth > nxt)).sum())


def count_regions(smooth: np.ndarray, threshold: float) -> int:
    """Maximal runs of bins above threshold on the circle.

    A run that crosses the last/first bin boundary counts once.
    """
    above = smooth > threshold
    if above.all():
        return 1
    starts = above & ~np.roll(above, 1)
    return int(starts.sum())


def spoke_estimate(xs: np.ndarray, ys: np.ndarray, cx: float, cy: float) -> Tuple[int, int]:
    """Return (region count, peak count) of the smoothed angular histogram."""
    smooth = smooth_circular(angular_histogram(xs, ys, cx, cy))
    threshold = PEAK_FRACTION * smooth.max()
    return count_regions(smooth, threshold), count_peaks(smooth, threshold)


def detect(buffer: PixelBuffer, band: Band, spec: TargetSpec = DEFAULT_SPEC) -> ChakraMetrics:
    """Measure the chakra inside ``band``.

    The expected diameter is always filled in; everything else only when
    enough chakra-blue pixels were found.
    """
    target = spec.chakra_diameter_ratio * band.rows
    if band.rows == 0:
        return ChakraMetrics(present=False, target_diameter=target, reason="empty white band")
    try:
        xs, ys, colors = chakra_pixels(buffer, band, spec)
    except InsufficientChakraSignalError as e:
        logger.warning("chakra not found: %d/%d matching pixels", e.found, e.required)
        return ChakraMetrics(present=False, target_diameter=target,
                             pixel_count=e.found, reason=str(e))

    cx, cy = float(xs.mean()), float(ys.mean())
    radius = float(np.sqrt(((xs - cx) ** 2 + (ys - cy) ** 2).max()))
    diameter = 2.0 * radius
    deviation = abs(diameter - target) / target

    ref_x, ref_y = buffer.width / 2.0, band.mid_y
    regions, peaks = spoke_estimate(xs, ys, cx, cy)

    mean = colors.mean(axis=0)

    logger.debug("chakra centroid=(%.2f, %.2f) radius=%.2f regions=%d peaks=%d pixels=%d",
                 cx, cy, radius, regions, peaks, len(xs))
    return ChakraMetrics(
        present=True,
        target_diameter=target,
        pixel_count=len(xs),
        centroid=(cx, cy),
        offset=(cx - ref_x, cy - ref_y),
        radius=radius,
        diameter=diameter,
        diameter_deviation=deviation,
        spoke_estimate=regions,
        peak_count=peaks,
        mean_color=(float(mean[0]), float(mean[1]), float(mean[2])),
    )

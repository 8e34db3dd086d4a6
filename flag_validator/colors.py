"""
Band color statistics and deviation scoring.

Deviation of one channel is |actual - target| / 255. The reported deviation
of a color is the mean over R, G, B; the tolerance check is stricter and
requires every channel to be within tolerance on its own.
"""

import math
from typing import Iterable, Tuple

import numpy as np

from .buffer import PixelBuffer
from .config import Color


def channel_deviations(actual: Color, target: Color) -> np.ndarray:
    """Per-channel deviation as a fraction of full scale 255."""
    return np.abs(np.asarray(actual, dtype=np.float64) - np.asarray(target, dtype=np.float64)) / 255.0


def deviation_percent(actual: Color, target: Color) -> float:
    """Mean per-channel deviation, in percent."""
    return float(channel_deviations(actual, target).mean() * 100.0)


def within_tolerance(actual: Color, target: Color, tolerance_percent: float) -> bool:
    """True only if every channel is within ``tolerance_percent`` of the target."""
    return bool((channel_deviations(actual, target) <= tolerance_percent / 100.0).all())


def nearest_label(rgb: np.ndarray, palette: Iterable[Tuple[str, Color]]) -> np.ndarray:
    """Label each color in ``rgb`` (shape (N, 3)) by the nearest palette entry.

    Squared Euclidean distance; on ties the earlier palette entry wins.
    """
    names, targets = zip(*palette)
    targets = np.asarray(targets, dtype=np.float64)
    d2 = ((rgb[:, None, :] - targets[None, :, :]) ** 2).sum(axis=2)
    return np.asarray(names)[np.argmin(d2, axis=1)]


def average_color(buffer: PixelBuffer, band, margin_fraction: float = 0.1) -> Color:
    """Mean RGB over the band's rows and the central columns of the image.

    ``margin_fraction`` of the width is dropped from each side to stay clear
    of edge and crop artifacts. If trimming leaves no columns the full width
    is used; an empty band averages to black.
    """
    if band.rows == 0:
        return (0.0, 0.0, 0.0)
    W = buffer.width
    x0 = int(math.floor(W * margin_fraction))
    x1 = min(W, int(math.ceil(W * (1.0 - margin_fraction))))
    cols = slice(x0, x1) if x1 > x0 else slice(None)
    data = buffer.region(slice(band.start, band.end + 1), cols)
    mean = data.reshape(-1, 3).mean(axis=0)
    return (float(mean[0]), float(mean[1]), float(mean[2]))

"""
Read-only pixel buffer handed to the core by the loader.

Samples are stored row-major as an (H, W, 4) uint8 RGBA array. Every row/column
lookup the checks make goes through ``PixelBuffer.region`` so slicing
arithmetic lives in exactly one place.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import InvalidBufferError


@dataclass(frozen=True)
class PixelBuffer:
    width: int
    height: int
    samples: np.ndarray

    def __post_init__(self):
        W, H = self.width, self.height
        if W <= 0 or H <= 0:
            raise InvalidBufferError(f"buffer must be non-empty, got {W}x{H}")
        arr = np.asarray(self.samples)
        if arr.shape != (H, W, 4):
            raise InvalidBufferError(
                f"sample array has shape {arr.shape}, expected {(H, W, 4)}")
        if np.issubdtype(arr.dtype, np.floating) and not np.isfinite(arr).all():
            raise InvalidBufferError("samples contain non-finite values")
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidBufferError("sample values must lie in [0, 255]")
        # Private copy: later writes to the caller's array must not leak in.
        data = np.array(arr, dtype=np.uint8, copy=True)
        data.flags.writeable = False
        object.__setattr__(self, "samples", data)

    @classmethod
    def from_flat(cls, width: int, height: int, samples: Sequence[int]) -> "PixelBuffer":
        """Build from a flat row-major RGBA sequence of length width*height*4."""
        if width <= 0 or height <= 0:
            raise InvalidBufferError(f"buffer must be non-empty, got {width}x{height}")
        arr = np.asarray(samples)
        expected = width * height * 4
        if arr.ndim != 1 or arr.size != expected:
            raise InvalidBufferError(
                f"expected {expected} RGBA samples for {width}x{height}, got {arr.size}")
        return cls(width, height, arr.reshape(height, width, 4))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Build from an (H, W, 4) RGBA or (H, W, 3) RGB array; RGB gets opaque alpha."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidBufferError(f"expected an (H, W, 3|4) array, got shape {arr.shape}")
        H, W = arr.shape[:2]
        if W == 0 or H == 0:
            raise InvalidBufferError(f"buffer must be non-empty, got {W}x{H}")
        if arr.shape[2] == 3:
            alpha = np.full((H, W, 1), 255, dtype=arr.dtype)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(W, H, arr)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def region(self, rows: slice = slice(None), cols: slice = slice(None)) -> np.ndarray:
        """Return ``samples[rows, cols]`` as a float64 RGB array (alpha dropped)."""
        return self.samples[rows, cols, :3].astype(np.float64)

    def rows(self, start: int, end: int) -> np.ndarray:
        """RGB samples for the inclusive row range [start, end], full width."""
        return self.region(slice(start, end + 1))

"""Shared test fixtures: synthetic flags drawn with numpy."""

import numpy as np
import pytest

from flag_validator import PixelBuffer

SAFFRON = (255, 153, 51)
WHITE = (255, 255, 255)
GREEN = (19, 136, 8)
NAVY = (0, 0, 128)


def draw_chakra(rgb, cx, cy, radius, spokes=24, rim=2.0, hub=6.0,
                spoke_half_deg=1.5, color=NAVY):
    """Paint a rim, a hub and ``spokes`` thin wedges centered at (cx, cy)."""
    H, W = rgb.shape[:2]
    yy, xx = np.mgrid[0:H, 0:W]
    dx, dy = xx - cx, yy - cy
    r = np.hypot(dx, dy)
    inside = r <= radius
    ring = inside & (r >= radius - rim)
    center = r <= hub
    mask = ring | center
    if spokes:
        half = np.radians(spoke_half_deg)
        step = 2.0 * np.pi / spokes
        phase = np.mod(np.arctan2(dy, dx) + half, step)
        mask |= inside & (phase <= 2.0 * half)
    rgb[mask] = color
    return rgb


def make_flag(width=900, height=600, top=SAFFRON, middle=WHITE, bottom=GREEN,
              chakra=True, spokes=24, radius=None, shift=(0.0, 0.0)):
    """RGBA (H, W, 4) uint8 flag with exact thirds and an optional chakra."""
    t1, t2 = height // 3, (2 * height) // 3
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[:t1] = top
    rgb[t1:t2] = middle
    rgb[t2:] = bottom
    if chakra:
        band_rows = t2 - t1
        cx = (width - 1) / 2.0 + shift[0]
        cy = (t1 + t2 - 1) / 2.0 + shift[1]
        draw_chakra(rgb, cx, cy, radius if radius is not None else 0.375 * band_rows, spokes=spokes)
    alpha = np.full((height, width, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)


@pytest.fixture
def flag_array():
    return make_flag()


@pytest.fixture
def flag_buffer(flag_array):
    return PixelBuffer.from_array(flag_array)


@pytest.fixture
def plain_flag_buffer():
    return PixelBuffer.from_array(make_flag(chakra=False))

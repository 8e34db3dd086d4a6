"""
Target flag specification and runtime limits.

TargetSpec holds every color and tolerance the checks use and is passed
explicitly into each validation call. The module-level limits only concern
the loader/CLI and may be overridden from the environment or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")

Color = Tuple[float, float, float]

# Reference colors (RGB)
SAFFRON: Color = (255.0, 153.0,  51.0)   # #FF9933
WHITE:   Color = (255.0, 255.0, 255.0)   # #FFFFFF
GREEN:   Color = ( 19.0, 136.0,   8.0)   # #138808
NAVY:    Color = (  0.0,   0.0, 128.0)   # #000080

# Loader / CLI limits
MAX_SIDE = int(os.getenv("FLAG_VALIDATOR_MAX_SIDE", "1600"))
MAX_FILE_BYTES = int(float(os.getenv("FLAG_VALIDATOR_MAX_FILE_MB", "5")) * 1024 * 1024)
LOG_LEVEL = os.getenv("FLAG_VALIDATOR_LOG_LEVEL", "WARNING")
REPORT_NAME = os.getenv("FLAG_VALIDATOR_REPORT_NAME", "flag_validation_report.json")
SUPPORTED_SUFFIXES = (".png", ".jpg", ".jpeg", ".svg")


@dataclass(frozen=True)
class TargetSpec:
    """Targets and tolerances for one validation call.

    Override any field with ``dataclasses.replace(DEFAULT_SPEC, ...)``.
    """

    aspect_ratio: float = 3.0 / 2.0
    saffron: Color = SAFFRON
    white: Color = WHITE
    green: Color = GREEN
    chakra_blue: Color = NAVY

    aspect_tolerance: float = 0.01      # ±1% relative
    color_tolerance_pct: float = 5.0    # ±5% per channel (of 255)

    stripe_tolerance: float = 0.01      # each band within ±1% of 1/3 of H
    band_margin: float = 0.1            # columns trimmed from each side for band colors

    chakra_min_pixels: int = 50
    chakra_diameter_ratio: float = 0.75     # of white band height
    chakra_diameter_tolerance: float = 0.02
    chakra_position_tolerance_px: float = 1.0
    chakra_spokes: int = 24
    spoke_tolerance: int = 1
    spoke_tolerance_loose: int = 2

    @property
    def stripe_palette(self):
        """Stripe colors in classification (tie-break) order."""
        return (("saffron", self.saffron), ("white", self.white), ("green", self.green))


DEFAULT_SPEC = TargetSpec()

"""
Validation report: one entry per rule, each holding its pass/fail status and
the measured numbers behind it.

``to_dict`` gives the stable JSON shape: percentages with 2 decimals, pixel
values rounded to whole pixels, "n/a" for values that could not be measured.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .chakra import ChakraMetrics
from .colors import deviation_percent, within_tolerance
from .config import DEFAULT_SPEC, Color, TargetSpec
from .stripes import BandAssignment

NA = "n/a"


def _status(ok: bool) -> str:
    return "pass" if ok else "fail"


def _pct(value: Optional[float]) -> str:
    return NA if value is None else f"{value:.2f}%"


def _px(value: Optional[float], suffix: str = "") -> str:
    return NA if value is None else f"{int(round(value))}{suffix}"


@dataclass(frozen=True)
class AspectRatioCheck:
    passed: bool
    actual: float
    deviation: float

    def to_dict(self) -> Dict[str, Any]:
        return {"status": _status(self.passed), "actual": f"{self.actual:.4f}"}


@dataclass(frozen=True)
class ColorCheck:
    passed: bool
    actual: Optional[Color]
    deviation: Optional[float]      # percent

    def to_dict(self) -> Dict[str, Any]:
        return {"status": _status(self.passed), "deviation": _pct(self.deviation)}


@dataclass(frozen=True)
class ColorChecks:
    saffron: ColorCheck
    white: ColorCheck
    green: ColorCheck
    chakra_blue: ColorCheck

    @property
    def passed(self) -> bool:
        return all(c.passed for c in (self.saffron, self.white, self.green, self.chakra_blue))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saffron": self.saffron.to_dict(),
            "white": self.white.to_dict(),
            "green": self.green.to_dict(),
            "chakra_blue": self.chakra_blue.to_dict(),
        }


@dataclass(frozen=True)
class StripeProportionCheck:
    passed: bool
    top: float
    middle: float
    bottom: float
    fallback: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": _status(self.passed),
            "top": f"{self.top:.4f}",
            "middle": f"{self.middle:.4f}",
            "bottom": f"{self.bottom:.4f}",
        }


@dataclass(frozen=True)
class ChakraPositionCheck:
    passed: bool
    offset_x: Optional[float]
    offset_y: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": _status(self.passed),
            "offset_x": _px(self.offset_x, "px"),
            "offset_y": _px(self.offset_y, "px"),
        }


@dataclass(frozen=True)
class ChakraDiameterCheck:
    passed: bool
    actual_px: Optional[float]
    expected_px: float
    deviation: Optional[float]      # fraction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": _status(self.passed),
            "actual_px": _px(self.actual_px),
            "expected_px": _px(self.expected_px),
            "deviation": NA if self.deviation is None else _pct(self.deviation * 100.0),
        }


@dataclass(frozen=True)
class ChakraSpokesCheck:
    passed: bool
    detected: int
    passed_loose: bool
    peaks: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {"status": _status(self.passed), "detected": self.detected}


@dataclass(frozen=True)
class ValidationReport:
    aspect_ratio: AspectRatioCheck
    colors: ColorChecks
    stripe_proportion: StripeProportionCheck
    chakra_position: ChakraPositionCheck
    chakra_diameter: ChakraDiameterCheck
    chakra_spokes: ChakraSpokesCheck
    chakra_present: bool
    chakra_reason: Optional[str]
    chakra_pixels: int

    @property
    def chakra_passed(self) -> bool:
        return self.chakra_position.passed and self.chakra_diameter.passed and self.chakra_spokes.passed

    @property
    def passed(self) -> bool:
        return (self.aspect_ratio.passed and self.colors.passed
                and self.stripe_proportion.passed and self.chakra_passed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aspect_ratio": self.aspect_ratio.to_dict(),
            "colors": self.colors.to_dict(),
            "stripe_proportion": self.stripe_proportion.to_dict(),
            "chakra_position": self.chakra_position.to_dict(),
            "chakra_diameter": self.chakra_diameter.to_dict(),
            "chakra_spokes": self.chakra_spokes.to_dict(),
            "chakra": {
                "status": _status(self.chakra_passed),
                "present": self.chakra_present,
                "reason": self.chakra_reason,
                "blue_pixels": self.chakra_pixels,
                "spoke_peaks": self.chakra_spokes.peaks,
                "spokes_loose_status": _status(self.chakra_spokes.passed_loose),
            },
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def check_color(actual: Optional[Color], target: Color, spec: TargetSpec) -> ColorCheck:
    if actual is None:
        return ColorCheck(False, None, None)
    return ColorCheck(
        passed=within_tolerance(actual, target, spec.color_tolerance_pct),
        actual=actual,
        deviation=deviation_percent(actual, target),
    )


def build(aspect: float, bands: BandAssignment, color_stats: Mapping[str, Color],
          chakra: ChakraMetrics, spec: TargetSpec = DEFAULT_SPEC) -> ValidationReport:
    """Apply the pass/fail policy of every rule to the collected measurements.

    ``color_stats`` maps saffron/white/green to the average color of the
    top/middle/bottom band. The chakra_blue rule scores the mean of pixels
    that were each matched within tolerance, so it passes whenever the chakra
    is present; it is a presence check with a measured deviation, not an
    independent color test.
    """
    ar_dev = abs(aspect - spec.aspect_ratio) / spec.aspect_ratio
    aspect_check = AspectRatioCheck(ar_dev <= spec.aspect_tolerance, aspect, ar_dev)

    colors = ColorChecks(
        saffron=check_color(color_stats["saffron"], spec.saffron, spec),
        white=check_color(color_stats["white"], spec.white, spec),
        green=check_color(color_stats["green"], spec.green, spec),
        # pixels were already matched within tolerance: passes iff present
        chakra_blue=check_color(chakra.mean_color if chakra.present else None,
                                spec.chakra_blue, spec),
    )

    top, middle, bottom = bands.fractions
    third = 1.0 / 3.0
    stripes = StripeProportionCheck(
        passed=all(abs(f - third) <= spec.stripe_tolerance for f in bands.fractions),
        top=top, middle=middle, bottom=bottom, fallback=bands.fallback,
    )

    if chakra.present:
        ox, oy = chakra.offset
        tol = spec.chakra_position_tolerance_px
        position = ChakraPositionCheck(abs(ox) < tol and abs(oy) < tol, ox, oy)
        diameter = ChakraDiameterCheck(
            passed=chakra.diameter_deviation <= spec.chakra_diameter_tolerance,
            actual_px=chakra.diameter,
            expected_px=chakra.target_diameter,
            deviation=chakra.diameter_deviation,
        )
        miss = abs(chakra.spoke_estimate - spec.chakra_spokes)
        spokes = ChakraSpokesCheck(
            passed=miss <= spec.spoke_tolerance,
            detected=chakra.spoke_estimate,
            passed_loose=miss <= spec.spoke_tolerance_loose,
            peaks=chakra.peak_count,
        )
    else:
        position = ChakraPositionCheck(False, None, None)
        diameter = ChakraDiameterCheck(False, None, chakra.target_diameter, None)
        spokes = ChakraSpokesCheck(False, 0, False, None)

    return ValidationReport(
        aspect_ratio=aspect_check,
        colors=colors,
        stripe_proportion=stripes,
        chakra_position=position,
        chakra_diameter=diameter,
        chakra_spokes=spokes,
        chakra_present=chakra.present,
        chakra_reason=chakra.reason,
        chakra_pixels=chakra.pixel_count,
    )

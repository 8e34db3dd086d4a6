"""Tests for row labelling, run-length encoding and band resolution."""

import numpy as np
import pytest

from flag_validator import PixelBuffer
from flag_validator.stripes import Band, classify, equal_thirds, row_labels, run_length
from tests.conftest import GREEN, SAFFRON, WHITE, make_flag


def _assert_partition(bands, height):
    assert bands.top.start == 0
    assert bands.top.end + 1 == bands.middle.start
    assert bands.middle.end + 1 == bands.bottom.start
    assert bands.bottom.end == height - 1


class TestRunLength:
    def test_runs_cover_all_rows(self):
        runs = run_length(np.array(["a", "a", "b", "a", "a", "a"]))
        assert [(r.label, r.first, r.last) for r in runs] == [("a", 0, 1), ("b", 2, 2), ("a", 3, 5)]
        assert sum(r.rows for r in runs) == 6

    def test_single_run(self):
        runs = run_length(np.array(["white"] * 4))
        assert len(runs) == 1 and runs[0].rows == 4


class TestClassify:
    @pytest.mark.parametrize("height", [3, 30, 300, 600])
    def test_exact_thirds(self, height):
        buf = PixelBuffer.from_array(make_flag(width=height * 3 // 2 or 1, height=height, chakra=False))
        bands = classify(buf)
        assert not bands.fallback
        _assert_partition(bands, height)
        for f in bands.fractions:
            assert f == pytest.approx(1.0 / 3.0, abs=1e-3)

    def test_chakra_rows_stay_white(self, flag_buffer):
        bands = classify(flag_buffer)
        assert [r.label for r in bands.runs] == ["saffron", "white", "green"]
        assert bands.middle == Band(200, 399)

    def test_row_labels_use_full_width(self):
        # left 60% green, right 40% white: the row mean is nearer green
        rgb = np.zeros((1, 10, 3), dtype=np.uint8)
        rgb[:, :6] = GREEN
        rgb[:, 6:] = WHITE
        assert row_labels(PixelBuffer.from_array(rgb)).tolist() == ["green"]

    def test_uneven_bands_measured(self):
        rgb = np.zeros((100, 150, 3), dtype=np.uint8)
        rgb[:20] = SAFFRON
        rgb[20:70] = WHITE
        rgb[70:] = GREEN
        bands = classify(PixelBuffer.from_array(rgb))
        assert bands.fractions == (0.2, 0.5, 0.3)
        assert (bands.top, bands.middle, bands.bottom) == (Band(0, 19), Band(20, 69), Band(70, 99))

    def test_white_run_before_saffron_is_skipped(self):
        rgb = np.zeros((100, 150, 3), dtype=np.uint8)
        rgb[:10] = WHITE
        rgb[10:40] = SAFFRON
        rgb[40:70] = WHITE
        rgb[70:] = GREEN
        bands = classify(PixelBuffer.from_array(rgb))
        assert not bands.fallback
        assert bands.top == Band(0, 39)
        assert bands.middle == Band(40, 69)
        assert bands.bottom == Band(70, 99)
        assert bands.fractions == (0.3, 0.3, 0.3)

    def test_leading_noise_row_joins_top_band(self):
        # a black first row is labelled green, but the saffron run still wins
        arr = make_flag(width=450, height=300, chakra=False)
        arr[0, :, :3] = 0
        bands = classify(PixelBuffer.from_array(arr))
        assert not bands.fallback
        assert bands.top == Band(0, 99)
        assert bands.fractions[0] == pytest.approx(99 / 300)
        _assert_partition(bands, 300)

    def test_wrong_order_falls_back_to_thirds(self):
        buf = PixelBuffer.from_array(make_flag(top=GREEN, bottom=SAFFRON, chakra=False))
        bands = classify(buf)
        assert bands.fallback
        assert bands.fractions == (1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0)
        _assert_partition(bands, 600)

    def test_single_color_falls_back(self):
        buf = PixelBuffer.from_array(np.full((10, 15, 3), 255, dtype=np.uint8))
        bands = classify(buf)
        assert bands.fallback
        assert (bands.top, bands.middle, bands.bottom) == equal_thirds(10)
        _assert_partition(bands, 10)


class TestEqualThirds:
    @pytest.mark.parametrize("height", [1, 2, 3, 10, 101])
    def test_partition(self, height):
        top, middle, bottom = equal_thirds(height)
        assert top.rows + middle.rows + bottom.rows == height
        assert top.start == 0 and bottom.end == height - 1
        assert top.end + 1 == middle.start and middle.end + 1 == bottom.start

from __future__ import annotations

import math
import unittest

import numpy as np

from linechart.config import ChartConfig
from linechart.geometry import (
    NAN_Y_OFFSET,
    ChartBounds,
    calculate_sizes,
    compute_value_range,
    map_points,
    safe_point,
)
from linechart.series import Series, ValueRange


def _bounds(width: float = 100.0, height: float = 100.0, padding: float = 0.0) -> ChartBounds:
    return ChartBounds(width=width, height=height, graph_width=width, graph_height=height, padding=padding)


class CoordinateMapperTests(unittest.TestCase):
    def test_higher_values_map_higher_on_screen(self) -> None:
        series = Series.from_pairs([("a", 1.0), ("b", 5.0), ("c", 3.0)])
        points = map_points(series, ValueRange(min=1.0, max=5.0), _bounds())
        a, b, c = (p.y for p in points)
        self.assertLess(b, c)
        self.assertLess(c, a)
        self.assertAlmostEqual(a, 100.0)
        self.assertAlmostEqual(b, 0.0)
        self.assertAlmostEqual(c, 50.0)

    def test_x_spacing_is_width_over_count(self) -> None:
        series = Series.from_pairs([("a", 1.0), ("b", 2.0), ("c", 3.0), ("d", 4.0)])
        points = map_points(series, compute_value_range(series), _bounds(width=200.0))
        self.assertEqual([p.x for p in points], [0.0, 50.0, 100.0, 150.0])

    def test_strictly_increasing_values_give_strictly_decreasing_y(self) -> None:
        for n in (2, 3, 7, 40):
            values = np.cumsum(np.linspace(0.5, 3.0, n))
            series = Series(labels=tuple(str(i) for i in range(n)), values=values)
            points = map_points(series, compute_value_range(series), _bounds(width=400.0, height=300.0))
            ys = [p.y for p in points]
            for prev, cur in zip(ys, ys[1:]):
                self.assertGreater(prev, cur)

        wide = Series.from_pairs([("lo", -1e308), ("mid", 0.0), ("hi", 1e308)])
        with np.errstate(all="raise"):
            points = map_points(wide, compute_value_range(wide), _bounds())
        self.assertEqual([p.y for p in points], [100.0, 50.0, 0.0])

    def test_points_are_clamped_inside_padding(self) -> None:
        series = Series.from_pairs([("lo", 0.0), ("hi", 10.0)])
        points = map_points(series, compute_value_range(series), _bounds(padding=16.0))
        self.assertEqual(points[0].y, 84.0)
        self.assertEqual(points[1].y, 16.0)

    def test_flat_series_sits_at_mid_height(self) -> None:
        series = Series.from_pairs([("a", 7.0), ("b", 7.0), ("c", 7.0)])
        value_range = compute_value_range(series)
        self.assertTrue(value_range.is_flat)
        points = map_points(series, value_range, _bounds(height=80.0))
        self.assertEqual([p.y for p in points], [40.0, 40.0, 40.0])
        self.assertTrue(all(math.isfinite(p.x) and math.isfinite(p.y) for p in points))

    def test_empty_series_maps_to_nothing(self) -> None:
        series = Series.from_pairs([])
        self.assertEqual(map_points(series, compute_value_range(series), _bounds()), ())

    def test_nan_values_fall_back_above_baseline(self) -> None:
        series = Series.from_pairs([("a", 1.0), ("b", float("nan")), ("c", 3.0)])
        value_range = compute_value_range(series)
        self.assertEqual((value_range.min, value_range.max), (1.0, 3.0))
        points = map_points(series, value_range, _bounds())
        self.assertEqual(points[1].y, 100.0 - NAN_Y_OFFSET)
        self.assertFalse(any(math.isnan(p.y) for p in points))

    def test_all_nan_series_has_empty_range_and_finite_points(self) -> None:
        series = Series.from_pairs([("a", float("nan")), ("b", float("nan"))])
        value_range = compute_value_range(series)
        self.assertTrue(value_range.is_empty)
        points = map_points(series, value_range, _bounds())
        self.assertEqual([p.y for p in points], [100.0 - NAN_Y_OFFSET] * 2)


class SafeGeometryTests(unittest.TestCase):
    def test_nan_x_becomes_zero(self) -> None:
        self.assertEqual(safe_point(float("nan"), 5.0, value=1.0, baseline=50.0).x, 0.0)

    def test_nan_y_uses_baseline_for_zero_value(self) -> None:
        self.assertEqual(safe_point(1.0, float("nan"), value=0.0, baseline=50.0).y, 50.0)

    def test_nan_y_uses_offset_for_nonzero_value(self) -> None:
        self.assertEqual(safe_point(1.0, float("nan"), value=2.0, baseline=50.0).y, 50.0 - NAN_Y_OFFSET)

    def test_finite_coordinates_pass_through(self) -> None:
        point = safe_point(3.0, 4.0, value=0.0, baseline=50.0)
        self.assertEqual((point.x, point.y), (3.0, 4.0))


class SizeCalculationTests(unittest.TestCase):
    def test_label_margins_are_subtracted_when_labels_shown(self) -> None:
        bounds = calculate_sizes(320, 200, ChartConfig(side_space=40.0, bottom_space=30.0))
        self.assertEqual((bounds.graph_width, bounds.graph_height), (280.0, 170.0))

    def test_hidden_labels_release_their_margins(self) -> None:
        config = ChartConfig(show_side_labels=False, show_bottom_labels=False)
        bounds = calculate_sizes(320, 200, config)
        self.assertEqual((bounds.graph_width, bounds.graph_height), (320.0, 200.0))

    def test_rejects_non_positive_size(self) -> None:
        with self.assertRaises(ValueError):
            calculate_sizes(0, 100, ChartConfig())


if __name__ == "__main__":
    unittest.main()

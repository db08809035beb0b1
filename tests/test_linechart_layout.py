from __future__ import annotations

import math
import unittest

from linechart.layout import (
    axis_lines,
    bottom_label_indices,
    bottom_labels,
    grid_count,
    horizontal_grid,
    side_label_values,
    side_labels,
    vertical_grid,
)
from linechart.series import Series, ValueRange


class GridLayoutTests(unittest.TestCase):
    def test_grid_count_never_exceeds_items_or_request(self) -> None:
        for items in range(0, 12):
            for requested in range(0, 12):
                count = grid_count(items, requested)
                self.assertLessEqual(count, items)
                self.assertLessEqual(count, requested)
                self.assertEqual(count, min(items, requested))

    def test_negative_request_draws_nothing(self) -> None:
        self.assertEqual(grid_count(5, -3), 0)

    def test_vertical_lines_are_evenly_spaced_from_left_edge(self) -> None:
        spec = vertical_grid(10, 4, graph_width=200.0, graph_height=120.0)
        self.assertEqual(spec.count, 4)
        self.assertEqual(spec.spacing, 50.0)
        self.assertEqual([line.start.x for line in spec.lines], [0.0, 50.0, 100.0, 150.0])
        self.assertTrue(all(line.start.y == 0.0 and line.end.y == 120.0 for line in spec.lines))

    def test_vertical_grid_is_capped_by_item_count(self) -> None:
        spec = vertical_grid(2, 8, graph_width=200.0, graph_height=120.0)
        self.assertEqual(spec.count, 2)

    def test_horizontal_lines_stack_up_from_baseline(self) -> None:
        spec = horizontal_grid(
            10,
            4,
            graph_width=200.0,
            graph_height=120.0,
            dash_patterns=((2.0, 2.0), (), (4.0, 1.0), ()),
        )
        self.assertEqual([line.start.y for line in spec.lines], [90.0, 60.0, 30.0, 0.0])
        self.assertTrue(all(line.start.x == 0.0 and line.end.x == 200.0 for line in spec.lines))
        self.assertEqual(spec.lines[0].dash_pattern, (2.0, 2.0))
        self.assertEqual(spec.lines[2].dash_pattern, (4.0, 1.0))

    def test_zero_items_produce_no_grid(self) -> None:
        for build in (vertical_grid, horizontal_grid):
            spec = build(0, 5, graph_width=200.0, graph_height=120.0)
            self.assertEqual(spec.count, 0)
            self.assertEqual(spec.lines, ())

    def test_axis_lines_sit_on_right_edge_and_baseline(self) -> None:
        value_axis, category_axis = axis_lines(graph_width=200.0, graph_height=120.0)
        self.assertEqual((value_axis.start.x, value_axis.end.x), (200.0, 200.0))
        self.assertEqual((category_axis.start.y, category_axis.end.y), (120.0, 120.0))


class SideLabelTests(unittest.TestCase):
    def test_max_is_always_the_last_value(self) -> None:
        cases = [(0.0, 1.0, 3), (1.0, 5.0, 4), (-2.5, 7.25, 6), (0.1, 0.7, 3), (10.0, 10.3, 7)]
        for lo, hi, requested in cases:
            values = side_label_values(ValueRange(min=lo, max=hi), requested)
            self.assertEqual(values[-1], hi)
            self.assertEqual(values, sorted(values))
            self.assertEqual(values[0], lo)
            self.assertEqual(len(values), requested + 1)

    def test_exact_stride_does_not_duplicate_max(self) -> None:
        values = side_label_values(ValueRange(min=1.0, max=5.0), 4)
        self.assertEqual(values, [1.0, 2.0, 3.0, 4.0, 5.0])

    def test_degenerate_ranges(self) -> None:
        self.assertEqual(side_label_values(ValueRange(min=None, max=None), 4), [])
        self.assertEqual(side_label_values(ValueRange(min=3.0, max=3.0), 4), [3.0])
        self.assertEqual(side_label_values(ValueRange(min=1.0, max=3.0), 0), [])

    def test_range_spanning_the_float_limits(self) -> None:
        values = side_label_values(ValueRange(min=-1e308, max=1e308), 4)
        expected = [-1e308, -5e307, 0.0, 5e307, 1e308]
        self.assertEqual(len(values), len(expected))
        for got, want in zip(values, expected):
            self.assertTrue(math.isclose(got, want, rel_tol=1e-12, abs_tol=1e295), (got, want))
        self.assertEqual(values[-1], 1e308)

    def test_labels_climb_from_baseline(self) -> None:
        placements = side_labels(ValueRange(min=1.0, max=5.0), 4, width=300.0, side_space=40.0, graph_height=100.0)
        self.assertEqual([p.text for p in placements], ["1", "2", "3", "4", "5"])
        self.assertEqual([p.position.y for p in placements], [100.0, 80.0, 60.0, 40.0, 20.0])
        self.assertTrue(all(p.position.x == 280.0 for p in placements))


class BottomLabelTests(unittest.TestCase):
    def test_stride_is_ceiling_of_items_over_request(self) -> None:
        self.assertEqual(bottom_label_indices(10, 3), [0, 4, 8])
        self.assertEqual(bottom_label_indices(6, 6), [0, 1, 2, 3, 4, 5])
        self.assertEqual(bottom_label_indices(3, 10), [0, 1, 2])

    def test_zero_counts_draw_nothing(self) -> None:
        self.assertEqual(bottom_label_indices(0, 4), [])
        self.assertEqual(bottom_label_indices(8, 0), [])

    def test_sampled_labels_keep_their_text(self) -> None:
        series = Series.from_pairs([(f"d{i}", float(i)) for i in range(10)])
        placements = bottom_labels(series, 3, graph_width=300.0, graph_height=100.0, padding=16.0)
        self.assertEqual([p.text for p in placements], ["d0", "d4", "d8"])
        self.assertEqual([p.position.x for p in placements], [0.0, 100.0, 200.0])
        self.assertTrue(all(p.position.y == 116.0 for p in placements))


if __name__ == "__main__":
    unittest.main()

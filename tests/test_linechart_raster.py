from __future__ import annotations

import unittest

import numpy as np

from linechart.raster import (
    apply_vertical_alpha,
    blit,
    dash_segments,
    draw_line,
    draw_text,
    fill_gradient,
    new_canvas,
    polygon_mask,
)
from linechart.raster.draw_lines import MAX_DASH_RUNS


class LineRasterTests(unittest.TestCase):
    def test_solid_line_covers_every_pixel_between_endpoints(self) -> None:
        canvas = new_canvas(20, 5)
        draw_line(canvas, 2, 2, 17, 2, color=(255, 0, 0, 255), width=1)
        self.assertTrue(np.all(canvas[2, 2:18, 3] == 255))
        self.assertEqual(int(canvas[0, 0, 3]), 0)

    def test_dash_pattern_splits_segment(self) -> None:
        runs = dash_segments(0.0, 0.0, 8.0, 0.0, (2.0, 2.0))
        self.assertEqual(runs, [(0.0, 0.0, 2.0, 0.0), (4.0, 0.0, 6.0, 0.0)])

    def test_sub_pixel_dash_pattern_falls_back_to_solid(self) -> None:
        runs = dash_segments(0.0, 0.0, 300.0, 0.0, (1e-7, 1e-7))
        self.assertLessEqual(len(runs), MAX_DASH_RUNS // 2 + 1)
        self.assertEqual(runs[-1][2:], (300.0, 0.0))
        self.assertLess(runs[-1][0], 1.0)

    def test_empty_dash_pattern_is_solid(self) -> None:
        dashed = new_canvas(30, 3)
        solid = new_canvas(30, 3)
        draw_line(dashed, 0, 1, 29, 1, color=(0, 0, 0, 255), dash_pattern=())
        draw_line(solid, 0, 1, 29, 1, color=(0, 0, 0, 255))
        self.assertTrue(np.array_equal(dashed, solid))

    def test_dashed_line_leaves_gaps(self) -> None:
        canvas = new_canvas(30, 3)
        draw_line(canvas, 0, 1, 29, 1, color=(0, 0, 0, 255), dash_pattern=(4.0, 6.0))
        row = canvas[1, :, 3]
        self.assertEqual(int(row[0]), 255)
        self.assertEqual(int(row[7]), 0)

    def test_hairline_fades_instead_of_vanishing(self) -> None:
        canvas = new_canvas(10, 3)
        draw_line(canvas, 0, 1, 9, 1, color=(0, 0, 0, 255), width=0.3)
        alpha = int(canvas[1, 5, 3])
        self.assertGreater(alpha, 0)
        self.assertLess(alpha, 255)


class FillRasterTests(unittest.TestCase):
    def test_polygon_mask_covers_interior(self) -> None:
        mask = polygon_mask(np.asarray([[0, 0], [9, 0], [9, 9], [0, 9]], dtype=np.float64), 10, 10)
        self.assertEqual(int(mask[5, 5]), 255)

    def test_fewer_than_three_vertices_fill_nothing(self) -> None:
        mask = polygon_mask(np.asarray([[0, 0], [9, 9]], dtype=np.float64), 10, 10)
        self.assertFalse(np.any(mask))

    def test_gradient_fades_towards_bottom(self) -> None:
        canvas = new_canvas(20, 40)
        square = np.asarray([[0, 0], [19, 0], [19, 39], [0, 39]], dtype=np.float64)
        fill_gradient(canvas, square, (0, 122, 255, 255), top_alpha=0.6, bottom_alpha=0.0)
        top = int(canvas[1, 10, 3])
        bottom = int(canvas[38, 10, 3])
        self.assertGreater(top, bottom)
        self.assertLessEqual(top, int(255 * 0.6) + 1)

    def test_vertical_alpha_ramp(self) -> None:
        canvas = new_canvas(2, 3, (0, 0, 0, 200))
        apply_vertical_alpha(canvas, 0.5, 1.0)
        self.assertEqual([int(a) for a in canvas[:, 0, 3]], [100, 150, 200])


class CompositingTests(unittest.TestCase):
    def test_blit_over_transparent_keeps_source(self) -> None:
        dst = new_canvas(2, 2)
        src = new_canvas(2, 2, (10, 20, 30, 128))
        blit(dst, src)
        self.assertEqual(tuple(int(c) for c in dst[0, 0]), (10, 20, 30, 128))

    def test_text_leaves_coverage(self) -> None:
        canvas = new_canvas(80, 30)
        box = draw_text(canvas, 40, 15, "42", (0, 0, 0, 255), anchor=(0.5, 0.5), font_size_px=14.0)
        self.assertGreater(box[2], 0)
        self.assertTrue(np.any(canvas[:, :, 3] > 0))


if __name__ == "__main__":
    unittest.main()

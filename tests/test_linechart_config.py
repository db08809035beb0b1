from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from linechart.config import ChartConfig, chart_config_from_mapping, load_chart_config
from linechart.series import ChartType


class ChartConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = ChartConfig()
        self.assertEqual(config.chart_type, ChartType.LINEAR)
        self.assertEqual(config.padding, 16.0)
        self.assertEqual(config.enabled_task_count(), 6)

    def test_hidden_layers_reduce_task_count(self) -> None:
        config = ChartConfig(show_vertical_grid=False, show_bottom_labels=False)
        self.assertEqual(config.enabled_task_count(), 4)

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            ChartConfig(line_width=0)
        with self.assertRaises(ValueError):
            ChartConfig(padding=-1)
        with self.assertRaises(ValueError):
            ChartConfig(grid_color=(0, 0, 300, 255))
        with self.assertRaises(ValueError):
            ChartConfig(chart_type="curved")  # type: ignore[arg-type]

    def test_mapping_coerces_types(self) -> None:
        config = chart_config_from_mapping(
            {"chart_type": "curved", "tint_color": [10, 20, 30], "line_width": 2, "show_side_labels": False}
        )
        self.assertEqual(config.chart_type, ChartType.CURVED)
        self.assertEqual(config.tint_color, (10, 20, 30, 255))
        self.assertEqual(config.line_width, 2.0)
        self.assertFalse(config.show_side_labels)

    def test_mapping_rejects_unknown_keys(self) -> None:
        with self.assertRaises(ValueError):
            chart_config_from_mapping({"colour": [1, 2, 3]})

    def test_mapping_rejects_bad_chart_type(self) -> None:
        with self.assertRaises(ValueError):
            chart_config_from_mapping({"chart_type": "bar"})

    def test_loads_chart_table_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                "[chart]\n"
                'chart_type = "curved"\n'
                "grid_width = 0.5\n"
                "show_vertical_grid = false\n"
                "grid_color = [200, 200, 200, 128]\n",
                encoding="utf-8",
            )
            config = load_chart_config(path)
        self.assertEqual(config.chart_type, ChartType.CURVED)
        self.assertEqual(config.grid_width, 0.5)
        self.assertFalse(config.show_vertical_grid)
        self.assertEqual(config.grid_color, (200, 200, 200, 128))

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config("/nonexistent/chart.toml")


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import argparse
import csv
from dataclasses import replace
import logging
from pathlib import Path

from linechart.chart import LineChart
from linechart.config import ChartConfig, load_chart_config
from linechart.provider import StaticDataSource
from linechart.series import ChartType


def read_series_csv(path: Path) -> list[tuple[str, float]]:
    """Rows of ``label,value``; a non-numeric first row is treated as a header."""
    pairs: list[tuple[str, float]] = []
    with path.open(newline="") as f:
        for row_number, row in enumerate(csv.reader(f)):
            if not row or not any(cell.strip() for cell in row):
                continue
            if len(row) < 2:
                raise ValueError(f"{path}:{row_number + 1}: expected label,value")
            label, raw = row[0].strip(), row[1].strip()
            try:
                value = float(raw)
            except ValueError:
                if row_number == 0:
                    continue
                raise ValueError(f"{path}:{row_number + 1}: value is not numeric: {raw!r}") from None
            pairs.append((label, value))
    return pairs


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="linechart")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a label,value CSV file to a PNG line chart.")
    render.add_argument("csv_path", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=640)
    render.add_argument("--height", type=int, default=360)
    render.add_argument("--type", choices=["linear", "curved"], default=None, help="Overrides chart_type from --config.")
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table.")
    render.add_argument("--bottom-labels", type=int, default=6)
    render.add_argument("--side-labels", type=int, default=5)
    render.add_argument("--vertical-lines", type=int, default=6)
    render.add_argument("--horizontal-lines", type=int, default=5)
    render.add_argument("--timeout", type=float, default=30.0)
    render.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "render":
        return _render(args)
    parser.error(f"unknown command: {args.command}")
    return 2


def _render(args: argparse.Namespace) -> int:
    config = load_chart_config(args.config) if args.config is not None else ChartConfig()
    if args.type is not None:
        config = _with_chart_type(config, ChartType[args.type.upper()])
    source = StaticDataSource(
        read_series_csv(args.csv_path),
        bottom_labels=args.bottom_labels,
        side_labels=args.side_labels,
        vertical_lines=args.vertical_lines,
        horizontal_lines=args.horizontal_lines,
    )
    chart = LineChart(args.width, args.height, config=config, data_source=source)
    try:
        ticket = chart.reload_data()
        assert ticket is not None
        if not ticket.wait(timeout=args.timeout):
            logging.getLogger(__name__).error("render did not finish within %.1fs", args.timeout)
            return 1
        chart.surface.save_png(str(args.out))
    finally:
        chart.close()
    print(f"wrote {args.out} ({args.width}x{args.height}, {config.chart_type.name.lower()})")
    return 0


def _with_chart_type(config: ChartConfig, chart_type: ChartType) -> ChartConfig:
    return replace(config, chart_type=chart_type)


if __name__ == "__main__":
    raise SystemExit(main())

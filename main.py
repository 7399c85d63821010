from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path

from PIL import Image

from pareto_plot import (
    ParetoChart,
    UpdateOptions,
    Viewport,
    high_contrast_palette,
    query_from_sequences,
    validate_format_settings,
)
from pareto_plot.palette import ColorPalette


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pareto-plot")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a CSV of category/value rows to a PNG.")
    render.add_argument("csv_path", type=Path)
    render.add_argument("--out", type=Path, required=True)
    _add_column_args(render)
    render.add_argument("--width", type=int, default=640)
    render.add_argument("--height", type=int, default=400)
    render.add_argument("--high-contrast", action="store_true")
    render.add_argument("--average-line", action="store_true")
    render.add_argument("--hide-axis", action="store_true")
    render.add_argument("--opacity", type=float, default=100.0, help="General bar opacity, 0-100.")
    render.add_argument("--select", action="append", default=[], help="Category label to highlight; repeatable.")

    summary = sub.add_parser("summary", help="Print per-category cumulative percentages as JSON.")
    summary.add_argument("csv_path", type=Path)
    _add_column_args(summary)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level))

    if args.command == "render":
        settings = validate_format_settings(
            {
                "axis_show": not args.hide_axis,
                "average_line_show": args.average_line,
                "general_opacity": args.opacity,
            }
        )
        palette = high_contrast_palette() if args.high_contrast else ColorPalette()
        chart = ParetoChart(palette)
        query = _read_query(args.csv_path, args.category_column, args.value_column)
        chart.update(UpdateOptions(query=query, viewport=Viewport(args.width, args.height), settings=settings))
        if args.select:
            wanted = set(args.select)
            ids = [p.selection_key for p in chart.state.points if p.category in wanted]
            chart.selection_manager.apply_external_selection(ids)
        frame = chart.frame()
        Image.fromarray(frame).save(args.out)
        print(f"rendered {len(chart.state.bars)} bars to {args.out} ({args.width}x{args.height})")
        return

    if args.command == "summary":
        chart = ParetoChart()
        query = _read_query(args.csv_path, args.category_column, args.value_column)
        chart.update(UpdateOptions(query=query, viewport=Viewport(640, 400)))
        rows = [
            {"category": p.category, "value": p.value, "cumulative_percent": round(p.cumulative_percent, 4)}
            for p in chart.state.points
        ]
        print(json.dumps(rows, indent=2))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_column_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category-column", default="category")
    parser.add_argument("--value-column", default="value")


def _read_query(path: Path, category_column: str, value_column: str):
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        fields = reader.fieldnames or []
        for column in (category_column, value_column):
            if column not in fields:
                raise ValueError(f"column {column!r} not found in {path}; available: {fields}")
        categories: list[str] = []
        values: list[float | str | None] = []
        for row in reader:
            categories.append(row[category_column])
            values.append(_parse_cell(row[value_column]))
    return query_from_sequences(categories, values, category_name=category_column, value_name=value_column)


def _parse_cell(raw: str | None) -> float | str | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return raw


if __name__ == "__main__":
    main()

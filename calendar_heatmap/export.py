"""CSV, SVG and PNG exports of the calendar grid.

Every export is a pure function of a grid and its scale, so repeated calls on
the same inputs return identical bytes.
"""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable

import pandas as pd
import plotly.graph_objects as go

from . import config, utils
from .domain import Domain
from .grid import DAYS, CalendarGrid, GridCell
from .pipeline import CalendarView
from .scale import EMPTY_COLOR, ScaleContext, cell_color, rgba

_logger = logging.getLogger(__name__)

CSV_HEADER = (
    "Day of Month",
    "Month",
    "Date",
    "Transaction Count",
    "Total Amount",
    "Average per Transaction",
    "Activity Level",
    "Valid Day",
)

SVG_NS = "http://www.w3.org/2000/svg"
FONT = "Arial, sans-serif"

GRID_START_X = 40
GRID_START_Y = 100
DAY_LABEL_WIDTH = 60
CELL_HEIGHT = 25
CELL_GAP = 3
LEGEND_OFFSET = 60

EMPTY_FILL = "#f9fafb"
LEGEND_EMPTY_FILL = "#f3f4f6"
BORDER = "#e5e7eb"
TODAY_BORDER = "#3b82f6"
TITLE_COLOR = "#111827"
MUTED_COLOR = "#6b7280"
COUNT_COLOR = "#374151"


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    mime: str
    data: bytes


def activity_level(count: int) -> str:
    if count == 0:
        return "None"
    if count == 1:
        return "Single"
    if count <= 3:
        return "Low"
    if count <= 6:
        return "Moderate"
    return "High"


def average_amount(cell: GridCell) -> float:
    return cell.amount / cell.count if cell.count > 0 else 0.0


def _csv_row(cell: GridCell) -> list[str]:
    if not cell.is_valid_day:
        return [str(cell.day), cell.month_label, "Invalid", "0", "0.00", "0.00", "N/A", "No"]
    return [
        str(cell.day),
        cell.month_label,
        cell.label,
        str(cell.count),
        utils.format_amount(cell.amount),
        utils.format_amount(average_amount(cell)),
        activity_level(cell.count),
        "Yes",
    ]


def csv_rows(grid: CalendarGrid) -> list[list[str]]:
    """One row per cell, day-major then month, without the header."""

    return [_csv_row(cell) for cell in grid.cells()]


def csv_frame(grid: CalendarGrid) -> pd.DataFrame:
    return pd.DataFrame(csv_rows(grid), columns=list(CSV_HEADER))


def to_csv(grid: CalendarGrid) -> str:
    return csv_frame(grid).to_csv(index=False, lineterminator="\n")


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _text(parent: ET.Element, x: float, y: float, content: str, **attrs: str) -> ET.Element:
    element = ET.SubElement(
        parent,
        "text",
        {"x": _fmt(x), "y": _fmt(y), "font-family": FONT, **attrs},
    )
    element.text = content
    return element


def _cell_rect(svg: ET.Element, cell: GridCell, x: float, y: float, width: int, scale: ScaleContext, domain: Domain) -> None:
    attrs = {
        "x": _fmt(x),
        "y": _fmt(y),
        "width": _fmt(width - CELL_GAP),
        "height": _fmt(CELL_HEIGHT - CELL_GAP),
        "rx": "3",
    }
    if cell.is_valid_day:
        color = cell_color(cell.amount, scale, domain)
        attrs["fill"] = EMPTY_FILL if color == EMPTY_COLOR else color
        if cell.is_today:
            attrs.update({"stroke": TODAY_BORDER, "stroke-width": "2"})
        else:
            attrs.update({"stroke": BORDER, "stroke-width": "1"})
    else:
        attrs.update({"fill": EMPTY_FILL, "stroke": BORDER, "stroke-width": "1", "opacity": "0.3"})
    ET.SubElement(svg, "rect", attrs)


def _legend(svg: ET.Element, width: int, y: float, scale: ScaleContext, domain: Domain, currency: str) -> None:
    center = width / 2
    _text(
        svg,
        center - 140,
        y,
        f"Less [{utils.format_currency(scale.min_amount, currency)}]",
        **{"font-size": "14", "fill": MUTED_COLOR, "text-anchor": "end"},
    )
    for index, stop in enumerate(config.LEGEND_STOPS):
        ET.SubElement(
            svg,
            "rect",
            {
                "x": _fmt(center - 60 + index * 24),
                "y": _fmt(y - 15),
                "width": "20",
                "height": "20",
                "rx": "3",
                "stroke": BORDER,
                "stroke-width": "1",
                "fill": LEGEND_EMPTY_FILL if stop == 0 else rgba(domain, stop),
            },
        )
    _text(
        svg,
        center + 80,
        y,
        f"More [{utils.format_currency(scale.max_amount_p80, currency)}]",
        **{"font-size": "14", "fill": MUTED_COLOR},
    )
    _text(
        svg,
        center + 80,
        y + 20,
        "(80th percentile)",
        **{"font-size": "11", "fill": MUTED_COLOR},
    )


def to_svg(
    grid: CalendarGrid,
    scale: ScaleContext,
    domain: Domain,
    title: str,
    currency: str = config.DEFAULT_CURRENCY,
    width: int = config.SVG_DEFAULT_WIDTH,
) -> str:
    """Render the grid as a standalone SVG document sized to ``width``."""

    cell_width = math.floor((width - GRID_START_X * 2 - DAY_LABEL_WIDTH) / 12)
    if cell_width <= CELL_GAP:
        raise ValueError(f"width {width} is too narrow for a 12-column calendar")
    legend_y = GRID_START_Y + DAYS * CELL_HEIGHT + LEGEND_OFFSET
    height = max(config.SVG_MIN_HEIGHT, legend_y + 60)

    svg = ET.Element(
        "svg",
        {"xmlns": SVG_NS, "width": str(width), "height": str(height), "viewBox": f"0 0 {width} {height}"},
    )
    ET.SubElement(svg, "rect", {"width": "100%", "height": "100%", "fill": "#ffffff"})
    _text(svg, 40, 40, title, **{"font-size": "22", "font-weight": "bold", "fill": TITLE_COLOR})

    grid_x = GRID_START_X + DAY_LABEL_WIDTH
    for month, label in enumerate(utils.MONTH_LABELS):
        _text(
            svg,
            grid_x + month * cell_width + cell_width / 2,
            GRID_START_Y - 15,
            label,
            **{"text-anchor": "middle", "font-size": "14", "font-weight": "bold", "fill": TITLE_COLOR},
        )

    for row_index, row in enumerate(grid.rows):
        row_y = GRID_START_Y + row_index * CELL_HEIGHT
        _text(
            svg,
            GRID_START_X + DAY_LABEL_WIDTH / 2,
            row_y + CELL_HEIGHT / 2 + 5,
            str(row_index + 1),
            **{"text-anchor": "middle", "font-size": "12", "fill": MUTED_COLOR},
        )
        for cell in row:
            x = grid_x + cell.month * cell_width
            _cell_rect(svg, cell, x, row_y, cell_width, scale, domain)
            if cell.is_valid_day and cell.count > 0:
                _text(
                    svg,
                    x + cell_width / 2,
                    row_y + CELL_HEIGHT / 2 + 4,
                    str(cell.count),
                    **{"text-anchor": "middle", "font-size": "12", "font-weight": "bold", "fill": COUNT_COLOR},
                )

    _legend(svg, width, legend_y, scale, domain, currency)

    body = ET.tostring(svg, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def to_png(figure: go.Figure, scale: int = config.PNG_SCALE) -> bytes:
    """Rasterize an interactive figure. Needs the optional ``kaleido`` engine."""

    return figure.to_image(format="png", scale=scale)


def export_csv(view: CalendarView) -> ExportedFile:
    return ExportedFile(f"{view.file_stem}.csv", "text/csv", to_csv(view.grid).encode("utf-8"))


def export_svg(view: CalendarView, width: int = config.SVG_DEFAULT_WIDTH) -> ExportedFile:
    document = to_svg(view.grid, view.scale, view.domain, view.title, view.currency, width)
    return ExportedFile(f"{view.file_stem}.svg", "image/svg+xml", document.encode("utf-8"))


def export_image(
    view: CalendarView,
    figure: go.Figure | None = None,
    *,
    rasterize: Callable[[go.Figure], bytes] = to_png,
    width: int = config.SVG_DEFAULT_WIDTH,
) -> ExportedFile:
    """Export a PNG snapshot of ``figure``, falling back to the SVG document.

    Rasterizer failures are logged and never raised.
    """

    if figure is not None:
        try:
            data = rasterize(figure)
        except Exception as exc:
            _logger.warning("PNG export of %s failed, falling back to SVG: %s", view.file_stem, exc)
        else:
            if data:
                return ExportedFile(f"{view.file_stem}.png", "image/png", data)
            _logger.warning("PNG export of %s returned no data, falling back to SVG", view.file_stem)
    return export_svg(view, width)

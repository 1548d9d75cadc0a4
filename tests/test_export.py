"""Tests for CSV, SVG and image exports."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import date
from io import StringIO

import pandas as pd
import plotly.graph_objects as go
import pytest
from calendar_heatmap import export, scale
from calendar_heatmap.pipeline import build_calendar

NS = {"svg": "http://www.w3.org/2000/svg"}

SCENARIO = [
    {"id": 1, "date": "2023-03-05", "amount": 100, "currency": "USD"},
    {"id": 2, "date": "2024-03-05", "amount": 50, "currency": "USD"},
]


def _view(transactions=SCENARIO, *, reference_year: int = 2023, today: date = date(2024, 3, 5)):
    return build_calendar(
        transactions,
        "expense",
        "USD",
        reference_year=reference_year,
        today=today,
    )


@pytest.mark.parametrize(
    ("count", "level"),
    [(0, "None"), (1, "Single"), (2, "Low"), (3, "Low"), (4, "Moderate"), (6, "Moderate"), (7, "High"), (40, "High")],
)
def test_activity_level_thresholds(count: int, level: str) -> None:
    assert export.activity_level(count) == level


def test_csv_rows_follow_grid_order_and_values() -> None:
    view = _view()
    rows = export.csv_rows(view.grid)

    assert len(rows) == 372
    assert rows[0][:2] == ["1", "Jan"]
    assert rows[(5 - 1) * 12 + 2] == ["5", "Mar", "Mar 5", "2", "150.00", "75.00", "Low", "Yes"]
    assert rows[(30 - 1) * 12 + 1] == ["30", "Feb", "Invalid", "0", "0.00", "0.00", "N/A", "No"]
    assert rows[(6 - 1) * 12 + 2] == ["6", "Mar", "Mar 6", "0", "0.00", "0.00", "None", "Yes"]


def test_csv_text_round_trips_through_pandas() -> None:
    view = _view()
    text = export.to_csv(view.grid)

    assert text.splitlines()[0] == ",".join(export.CSV_HEADER)
    frame = pd.read_csv(StringIO(text), dtype=str, keep_default_na=False)
    assert len(frame) == 372
    assert frame.values.tolist() == export.csv_rows(view.grid)


def test_csv_counts_match_grid_total() -> None:
    view = _view()
    frame = export.csv_frame(view.grid)
    assert frame["Transaction Count"].astype(int).sum() == view.grid.total_count == 2


def test_svg_structure() -> None:
    view = _view()
    document = export.to_svg(view.grid, view.scale, view.domain, view.title, view.currency)
    root = ET.fromstring(document.split("\n", 1)[1])

    assert root.attrib["width"] == "2500"
    assert root.attrib["height"] == "1000"

    rects = root.findall("svg:rect", NS)
    # background + 372 cells + 5 legend swatches
    assert len(rects) == 1 + 372 + 5
    assert sum(1 for rect in rects if rect.get("opacity") == "0.3") == 7

    texts = [element.text for element in root.findall("svg:text", NS)]
    assert texts[0] == view.title
    assert texts[1:13] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    assert "2" in texts
    assert "Less [USD 150.00]" in texts
    assert "More [USD 150.00]" in texts


def test_svg_cell_fill_matches_scaler_and_today_outline() -> None:
    view = _view(today=date(2023, 3, 5))
    document = export.to_svg(view.grid, view.scale, view.domain, view.title, view.currency)
    root = ET.fromstring(document.split("\n", 1)[1])

    filled = [rect for rect in root.findall("svg:rect", NS) if rect.get("fill", "").startswith("rgba(239")]
    assert [rect.get("fill") for rect in filled][0] == scale.cell_color(150.0, view.scale, view.domain)

    today = [rect for rect in root.findall("svg:rect", NS) if rect.get("stroke") == export.TODAY_BORDER]
    assert len(today) == 1
    assert today[0].get("stroke-width") == "2"


def test_svg_for_empty_grid_has_no_coloured_cells() -> None:
    view = _view([])
    document = export.to_svg(view.grid, view.scale, view.domain, view.title, view.currency)
    root = ET.fromstring(document.split("\n", 1)[1])
    cell_fills = {rect.get("fill") for rect in root.findall("svg:rect", NS)[1:373]}
    assert cell_fills == {export.EMPTY_FILL}


def test_svg_rejects_too_narrow_width() -> None:
    view = _view()
    with pytest.raises(ValueError):
        export.to_svg(view.grid, view.scale, view.domain, view.title, width=150)


def test_exports_are_byte_identical_across_runs() -> None:
    first = _view()
    second = _view()

    assert export.export_csv(first) == export.export_csv(second)
    assert export.export_svg(first) == export.export_svg(second)


def test_export_file_names() -> None:
    view = _view()
    assert export.export_csv(view).filename == "expense-transaction-frequency.csv"
    assert export.export_svg(view).mime == "image/svg+xml"


def test_export_image_uses_rasterizer_when_it_works() -> None:
    view = _view()
    image = export.export_image(view, go.Figure(), rasterize=lambda figure: b"\x89PNG")
    assert image.filename == "expense-transaction-frequency.png"
    assert image.data == b"\x89PNG"


def test_export_image_falls_back_to_svg_on_rasterizer_failure() -> None:
    def failing(figure: go.Figure) -> bytes:
        raise RuntimeError("no rasterizer")

    view = _view()
    image = export.export_image(view, go.Figure(), rasterize=failing)
    assert image == export.export_svg(view)


def test_export_image_without_figure_is_svg() -> None:
    view = _view()
    assert export.export_image(view).filename.endswith(".svg")

"""Interactive Plotly rendering of the calendar heatmap."""

from __future__ import annotations

import plotly.graph_objects as go

from . import utils
from .export import BORDER, EMPTY_FILL, TODAY_BORDER, activity_level, average_amount
from .grid import DAYS, CalendarGrid, GridCell
from .pipeline import CalendarView
from .scale import EMPTY_COLOR, cell_color


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def _hover_text(cell: GridCell, view: CalendarView) -> str:
    if not cell.is_valid_day:
        return f"{cell.label} does not exist"
    if cell.count == 0:
        return f"{cell.label}: No transactions"
    return (
        f"<b>{cell.label}</b><br>"
        f"Total Transactions: {cell.count}<br>"
        f"Total Amount: {utils.format_currency(cell.amount, view.currency)}<br>"
        f"Average per Transaction: {utils.format_currency(average_amount(cell), view.currency)}<br>"
        f"Activity Level: {activity_level(cell.count)}<br>"
        "Click to view details"
    )


def cell_at_point(grid: CalendarGrid, point_index: int) -> GridCell:
    """Map a trace point index from :func:`plot_calendar_heatmap` back to its cell."""

    return grid.rows[point_index // 12][point_index % 12]


def plot_calendar_heatmap(view: CalendarView, *, marker_size: int = 20) -> go.Figure:
    """Return the 31 x 12 calendar as a single square-marker scatter trace.

    Points are in day-major order so ``point_index`` maps straight back to a
    cell; fills use the same colours as the SVG export.
    """

    cells = list(view.grid.cells())
    if not cells:
        return _empty_figure("No calendar to display.")

    fills = []
    opacities = []
    outline_colors = []
    outline_widths = []
    for cell in cells:
        color = cell_color(cell.amount, view.scale, view.domain) if cell.is_valid_day else EMPTY_COLOR
        fills.append(EMPTY_FILL if color == EMPTY_COLOR else color)
        opacities.append(1.0 if cell.is_valid_day else 0.3)
        outline_colors.append(TODAY_BORDER if cell.is_today else BORDER)
        outline_widths.append(2 if cell.is_today else 1)

    fig = go.Figure(
        go.Scatter(
            x=[cell.month_label for cell in cells],
            y=[cell.day for cell in cells],
            mode="markers+text",
            text=[str(cell.count) if cell.is_valid_day and cell.count else "" for cell in cells],
            textfont=dict(size=10, color="#374151"),
            hovertext=[_hover_text(cell, view) for cell in cells],
            hoverinfo="text",
            marker=dict(
                symbol="square",
                size=marker_size,
                color=fills,
                opacity=opacities,
                line=dict(color=outline_colors, width=outline_widths),
            ),
            showlegend=False,
        )
    )
    fig.update_layout(
        title=view.title,
        height=DAYS * (marker_size + 4) + 120,
        margin=dict(l=0, r=0, t=60, b=0),
        plot_bgcolor="#ffffff",
        clickmode="event+select",
        dragmode=False,
    )
    fig.update_xaxes(
        type="category",
        categoryorder="array",
        categoryarray=list(utils.MONTH_LABELS),
        side="top",
        showgrid=False,
        fixedrange=True,
    )
    fig.update_yaxes(
        autorange="reversed",
        dtick=1,
        showgrid=False,
        zeroline=False,
        fixedrange=True,
    )
    return fig

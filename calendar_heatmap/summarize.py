"""Text summaries of a calendar view.

When the OpenAI client or API key is missing, or the call fails, a short
deterministic summary built from :func:`insights.calendar_highlights` is
returned instead.
"""

from __future__ import annotations

import logging
from typing import Any

from . import config, insights, utils
from .pipeline import CalendarView

_logger = logging.getLogger(__name__)

try:  # pragma: no cover - optional dependency
    from openai import OpenAI  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    OpenAI = None  # type: ignore[assignment]


def _build_prompt(view: CalendarView, highlights: insights.CalendarHighlights) -> str:
    return f"""
You are a personal finance app describing a {view.domain.key} calendar heatmap.
Use 3-4 concise sentences. Amounts are in {view.currency}, 2dp.
The calendar folds every year present ({', '.join(map(str, highlights['years'])) or 'none'}) onto one
day-of-month by month grid.

DATA (JSON-like):
{highlights}

Mention the busiest day, the largest-amount day and how concentrated activity is.
"""


def fallback_summary(view: CalendarView) -> str:
    """Return a compact summary without calling an LLM."""

    h = insights.calendar_highlights(view)
    if h["total_count"] == 0:
        return f"Highlights: no {view.domain.key} transactions in {view.period_label.lower()}."

    years = h["years"]
    span = f"{years[0]}" if len(years) == 1 else f"{years[0]}-{years[-1]}"
    text = (
        f"Highlights: {utils.pluralise(h['total_count'], 'transaction')} totalling "
        f"{utils.format_currency(h['total_amount'], view.currency)} across {h['active_days']} "
        f"calendar days ({span})."
    )
    busiest = h["busiest_day"]
    if busiest:
        text += f" Busiest day: {busiest['label']} ({utils.pluralise(busiest['count'], 'transaction')})."
    largest = h["largest_day"]
    if largest:
        text += f" Largest total: {largest['label']} ({utils.format_currency(largest['amount'], view.currency)})."
    high_days = h["activity_distribution"]["High"]
    if high_days:
        text += f" {utils.pluralise(high_days, 'day')} show high activity (7+ transactions)."
    return text


def summarize_calendar(
    view: CalendarView,
    *,
    model: str = config.LLM_MODEL,
    client: Any | None = None,
) -> str:
    """Summarise the calendar with an LLM, falling back to :func:`fallback_summary`."""

    highlights = insights.calendar_highlights(view)
    if highlights["total_count"] == 0:
        return fallback_summary(view)

    if client is None:
        if OpenAI is None:
            _logger.info("openai package not installed; using fallback summary")
            return fallback_summary(view)
        api_key = config.get_setting("OPENAI_API_KEY")
        if not api_key:
            _logger.info("OPENAI_API_KEY not configured; using fallback summary")
            return fallback_summary(view)
        client = OpenAI(api_key=api_key)

    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": _build_prompt(view, highlights)}],
            temperature=0.2,
            max_tokens=220,
        )
        text = (resp.choices[0].message.content or "").strip()
    except Exception as exc:
        _logger.warning("LLM summary failed: %s: %s", type(exc).__name__, exc)
        return fallback_summary(view)

    return text or fallback_summary(view)

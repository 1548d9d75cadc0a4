"""Streamlit entry point for the transaction calendar heatmap."""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st
from calendar_heatmap import config, export, insights, interaction, summarize, synth, utils, viz
from calendar_heatmap.currency import DEFAULT_RATES, RateTableConverter
from calendar_heatmap.domain import Domain
from calendar_heatmap.pipeline import build_calendar


@st.cache_data(show_spinner=False)
def _load_synthetic(domain_key: str, months: int, seed: int) -> pd.DataFrame:
    return synth.generate_transactions(domain_key, months=months, seed=seed)


def _navigate(domain: Domain, start_date: str, end_date: str) -> None:
    st.query_params["view"] = domain.key
    st.query_params["startDate"] = start_date
    st.query_params["endDate"] = end_date


def _resolve_range(option: str, min_date: date, max_date: date) -> tuple[date, date]:
    if option == "Last 12 months":
        start = (pd.Timestamp(max_date) - pd.DateOffset(months=12) + pd.Timedelta(days=1)).date()
        return max(start, min_date), max_date
    if option == "Year to date":
        return max(date(max_date.year, 1, 1), min_date), max_date
    return min_date, max_date


def main() -> None:
    """Render the calendar heatmap Streamlit application."""

    config.configure_logging()
    st.set_page_config(page_title="Transaction Calendar", page_icon="📅", layout="wide")

    sidebar = st.sidebar
    sidebar.header("Calendar controls")
    domain = Domain.parse(
        sidebar.radio("Transactions", [member.key for member in Domain], format_func=str.title, index=1)
    )
    currency = sidebar.selectbox(
        "Display currency",
        sorted(DEFAULT_RATES),
        index=sorted(DEFAULT_RATES).index(config.DEFAULT_CURRENCY) if config.DEFAULT_CURRENCY in DEFAULT_RATES else 0,
        help="Amounts are converted with a static demo rate table.",
    )

    uploaded = sidebar.file_uploader("Transactions CSV (id, date, amount, currency)", type="csv")
    if uploaded is not None:
        try:
            transactions = utils.normalise_transactions(pd.read_csv(uploaded), default_currency=currency)
        except ValueError as exc:
            st.error(f"Could not read {uploaded.name}: {exc}")
            st.stop()
        source_caption = uploaded.name
    else:
        seed = int(sidebar.number_input("Random seed", value=synth.DEFAULT_SEED, min_value=0, step=1))
        months = int(sidebar.slider("Months of history", min_value=3, max_value=48, value=synth.DEFAULT_MONTHS, step=3))
        transactions = _load_synthetic(domain.key, months, seed)
        source_caption = "Synthetic data"

    period = sidebar.radio("Time range", ["All time", "Last 12 months", "Year to date"], index=0)
    if not transactions.empty:
        dates = pd.to_datetime(transactions["date"], format="mixed")
        start, end = _resolve_range(period, dates.min().date(), dates.max().date())
        transactions = transactions.loc[(dates.dt.date >= start) & (dates.dt.date <= end)].copy()
        period_label = f"{period} ({start} → {end})"
    else:
        period_label = period

    view = build_calendar(
        transactions,
        domain,
        currency,
        RateTableConverter(),
        period_label=period_label,
    )

    st.title(view.title)
    st.caption(f"{source_caption} · {view.description}")
    if view.failed_ids:
        st.warning(
            f"{utils.pluralise(len(view.failed_ids), 'transaction')} could not be converted to "
            f"{view.currency} and are counted without an amount."
        )

    legend = (
        f"Less [{utils.format_currency(view.scale.min_amount, view.currency)}] · "
        f"More [{utils.format_currency(view.scale.max_amount_p80, view.currency)}] (80th percentile)"
    )
    st.caption(legend)

    figure = viz.plot_calendar_heatmap(view)
    event = st.plotly_chart(
        figure,
        use_container_width=True,
        config={"displayModeBar": False},
        on_select="rerun",
        selection_mode="points",
        key=f"calendar-{domain.key}",
    )

    points = event.get("selection", {}).get("points", []) if event else []
    if points:
        cell = viz.cell_at_point(view.grid, int(points[0]["point_index"]))
        details = insights.cell_details(cell, view.grid.years)
        request = interaction.dispatch_click(cell, view.domain, _navigate)
        if request is None:
            st.info(f"{details['label']}: {details['hint']}")
        else:
            st.success(
                f"{details['label']}: {details['count']} transactions, "
                f"{utils.format_currency(details['amount'], view.currency)}. "
                f"Open [{request.url}]({request.url})"
            )

    with st.expander("Summary", expanded=False):
        st.write(summarize.summarize_calendar(view))

    sidebar.subheader("Exports")
    csv_file = export.export_csv(view)
    sidebar.download_button("Download CSV", data=csv_file.data, file_name=csv_file.filename, mime=csv_file.mime)
    svg_file = export.export_svg(view)
    sidebar.download_button("Download SVG", data=svg_file.data, file_name=svg_file.filename, mime=svg_file.mime)
    if sidebar.button("Prepare image"):
        image = export.export_image(view, figure)
        sidebar.download_button(
            f"Download {image.filename.rsplit('.', 1)[-1].upper()}",
            data=image.data,
            file_name=image.filename,
            mime=image.mime,
        )


if __name__ == "__main__":
    main()

import altair as alt
import streamlit as st

from helmetwatch.alert_feed import latest_emergency
from helmetwatch.metrics import active_readings, format_number, format_value, latest_reading
from helmetwatch.prefs_store import load_pref, save_pref
from helmetwatch.series import SERIES_METRICS, datetime_label, series_frame
from helmetwatch.ui.components.cards import chart_card, metric_card, reading_card

PREF_KEY = "overview_series_metrics"


def load_metric_prefs() -> list[str] | None:
    stored = load_pref(PREF_KEY)
    if not isinstance(stored, list):
        return None
    return [metric for metric in stored if metric in SERIES_METRICS]


def series_chart(df, height=260):
    return (
        alt.Chart(df)
        .mark_line(interpolate="monotone", strokeWidth=2, point=True)
        .encode(
            x=alt.X("order:O", title="Reading", axis=alt.Axis(labels=False, ticks=False)),
            y=alt.Y("value:Q", title=None),
            color=alt.Color("metric:N", legend=alt.Legend(title=None)),
            tooltip=["time:N", "metric:N", alt.Tooltip("value:Q", format=".1f")],
        )
        .properties(height=height)
    )


def render_summary(metrics: dict, latest: dict):
    cols = st.columns(4)
    with cols[0]:
        metric_card(
            "Avg. Temp",
            f"{format_number(metrics['avg_temperature'], 1)} C",
            subvalue=f"Latest: {format_value(latest.get('temperature'))} C",
            chip="Optimum: 24 C",
        )
    with cols[1]:
        metric_card(
            "Avg. Humidity",
            f"{format_number(metrics['avg_humidity'], 1)} %",
            subvalue=f"Latest: {format_value(latest.get('humidity'))} %",
            chip="Optimum: 60%",
        )
    with cols[2]:
        metric_card(
            "Avg. Gas",
            format_number(metrics["avg_gas"], 1),
            subvalue=f"Latest: {format_value(latest.get('gasValue'))}",
            chip="gasValue",
        )
    with cols[3]:
        metric_card(
            "System status",
            metrics["system_status"],
            subvalue=metrics["system_note"],
            chip="Live",
            status=metrics["system_status"],
        )


def render_latest_emergency(alerts, tz_name):
    st.markdown("<div class='section-title'>Safety summary</div>", unsafe_allow_html=True)
    summary = latest_emergency(alerts)
    if summary is None:
        st.success("No emergency flags in recent data. Temperature, gas and movement are within configured bounds.")
        return
    when = datetime_label(summary["timestamp"], tz_name, "unknown time")
    st.error(f"Latest emergency at {when}. Reason: {summary['reason']}")
    st.caption("Monitor gasValue, temperature and G-force closely for this helmet.")


def render(ctx):
    batch = ctx.get("batch") or []
    metrics = ctx["metrics"]
    tz_name = ctx.get("tz_name")

    render_summary(metrics, latest_reading(batch))
    render_latest_emergency(ctx.get("alerts") or [], tz_name)

    st.markdown(
        f"<div class='section-title'>Active readings ({metrics['reading_count']} in last fetch)</div>",
        unsafe_allow_html=True,
    )
    readings = active_readings(batch)
    if not readings:
        st.info("No recent readings.")
    else:
        cols = st.columns(len(readings))
        for index, (col, reading) in enumerate(zip(cols, readings)):
            with col:
                reading_card(reading, index, tz_name)

    series = ctx.get("series") or []
    stored = load_metric_prefs()
    with st.expander("Customize chart", expanded=False):
        selected = st.multiselect(
            "Series",
            options=list(SERIES_METRICS),
            default=stored or list(SERIES_METRICS),
            format_func=lambda key: SERIES_METRICS[key],
            key="overview_series_metrics_ui",
        )
        if selected != st.session_state.get("overview_series_metrics_saved"):
            save_pref(PREF_KEY, selected)
            st.session_state.overview_series_metrics_saved = selected

    def body():
        if not series or not selected:
            st.info("No trend data available.")
            return
        st.altair_chart(series_chart(series_frame(series, selected)), use_container_width=True)

    chart_card("Temperature & humidity trend", body, controls=f"last {ctx.get('series_window')} readings")

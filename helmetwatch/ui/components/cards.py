import html

import streamlit as st

from helmetwatch.alert_feed import alert_reason
from helmetwatch.metrics import format_number, format_value
from helmetwatch.series import datetime_label


def html_escape(value, fallback: str = "--") -> str:
    if value is None or value == "":
        return fallback
    return html.escape(str(value))


def metric_card(label: str, value: str, subvalue: str | None = None, chip: str | None = None, status: str | None = None):
    sub_html = f"<div class=\"metric-sub\">{html_escape(subvalue)}</div>" if subvalue else ""
    chip_html = f"<span class=\"metric-chip\">{html_escape(chip)}</span>" if chip else ""
    status_class = f" status-{status.lower()}" if status else ""
    st.markdown(
        f"""
        <div class="card metric-card{status_class}">
          <div class="metric-label">{html_escape(label)}{chip_html}</div>
          <div class="metric-value">{html_escape(value)}</div>
          {sub_html}
        </div>
        """,
        unsafe_allow_html=True,
    )


def chart_card(title: str | None, body_renderer, controls: str | None = None):
    if title and title.strip():
        controls_text = f" ({html_escape(controls)})" if controls else ""
        st.markdown(
            f"<div class='section-title'>{html_escape(title)}{controls_text}</div>",
            unsafe_allow_html=True,
        )
    with st.container(border=True):
        body_renderer()


def status_card(title: str, items: list[tuple[str, str]]):
    lines = "".join(
        f"<div class=\"status-line\"><span>{html_escape(label)}</span><span>{html_escape(value)}</span></div>"
        for label, value in items
    )
    st.markdown(
        f"""
        <div class="card status-card">
          <div class="section-title">{html_escape(title)}</div>
          {lines}
        </div>
        """,
        unsafe_allow_html=True,
    )


def reading_card(reading: dict, index: int, tz_name: str):
    """Card for one normalized reading (see records.normalize_record)."""
    emergency = reading.get("emergency") is True
    chip = "<span class='chip-emergency'>Emergency</span>" if emergency else "<span class='chip-ok'>Monitoring</span>"
    pills = [
        ("Temp", f"{format_value(reading.get('temperature'))} C"),
        ("Humidity", f"{format_value(reading.get('humidity'))} %"),
        ("Gas", format_value(reading.get("gasValue"))),
        ("Flame", format_value(reading.get("flameStatus"))),
        ("IR", format_value(reading.get("irValue"))),
        ("G-force", format_number(reading.get("gForce"), 2)),
    ]
    pills_html = "".join(
        f"<span class='reading-pill'>{label}: <strong>{html_escape(value)}</strong></span>"
        for label, value in pills
    )
    reason_html = ""
    if emergency:
        reason_html = f"<div class='metric-sub chip-emergency'>{html_escape(alert_reason(reading))}</div>"
    st.markdown(
        f"""
        <div class="card reading-card">
          <div class="metric-label">Helmet #{index + 1} {chip}</div>
          <div class="metric-sub">{html_escape(datetime_label(reading.get('timestamp'), tz_name, 'No timestamp'))}</div>
          <div class="reading-pills">{pills_html}</div>
          <div class="metric-sub">Location: <strong>{html_escape(reading.get('location'), 'Not provided')}</strong></div>
          {reason_html}
        </div>
        """,
        unsafe_allow_html=True,
    )


def alert_item(record: dict, tz_name: str):
    st.markdown(
        f"""
        <div class="card alert-item">
          <span class="alert-badge">Emergency</span>
          <span class="alert-reason">{html_escape(alert_reason(record))}</span>
          <span class="alert-time">{html_escape(datetime_label(record.get('timestamp'), tz_name, ''), '')}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )

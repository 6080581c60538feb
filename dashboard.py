import html

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from helmetwatch.alert_feed import AlertPager, filter_alerts
from helmetwatch.metrics import compute_metrics
from helmetwatch.pages import alerts as page_alerts
from helmetwatch.pages import data as page_data
from helmetwatch.pages import overview as page_overview
from helmetwatch.poller import FeedState, run_cycle
from helmetwatch.sensor_api import fetch_recent_data
from helmetwatch.series import build_series, datetime_label
from helmetwatch.settings import (
    ALERTS_PER_PAGE,
    HELMET_API_BASE,
    LOCAL_TZ,
    POLL_INTERVAL_SECONDS,
    SERIES_WINDOW,
)
from helmetwatch.ui.apply_styles import apply_styles
from helmetwatch.ui.shell import NAV_PAGES, render_header_strip, render_left_rail

st.set_page_config(
    page_title="Helmet Safety Overview",
    layout="wide",
)

apply_styles()

# ------------------------
# Session state
# ------------------------
if "feed_state" not in st.session_state:
    st.session_state.feed_state = FeedState()
if "alert_pager" not in st.session_state:
    st.session_state.alert_pager = AlertPager(page_size=ALERTS_PER_PAGE)
if "page" not in st.session_state:
    st.session_state.page = "overview"
try:
    query_page = st.query_params.get("page")
except Exception:
    query_page = None
if query_page in NAV_PAGES:
    st.session_state.page = query_page

feed_state: FeedState = st.session_state.feed_state
pager: AlertPager = st.session_state.alert_pager

# ------------------------
# Polling (one fetch per autorefresh tick)
# ------------------------
refresh_count = 0
if POLL_INTERVAL_SECONDS > 0:
    refresh_count = st_autorefresh(
        interval=POLL_INTERVAL_SECONDS * 1000,
        key="helmet_poll_autorefresh",
    )


def render_controls():
    st.markdown("<div class='section-title'>Controls</div>", unsafe_allow_html=True)
    if st.button("Refresh", key="manual_refresh", disabled=feed_state.loading and feed_state.issued > 0):
        st.session_state.manual_refresh_requested = True
    st.caption(f"Auto refresh every {POLL_INTERVAL_SECONDS}s")


render_left_rail(st.session_state.page, render_controls)

tick_changed = st.session_state.get("last_refresh_count") != refresh_count
manual = st.session_state.pop("manual_refresh_requested", False)
if feed_state.issued == 0 or tick_changed or manual:
    st.session_state.last_refresh_count = refresh_count
    with st.spinner("Loading live data..."):
        run_cycle(feed_state, lambda: fetch_recent_data(HELMET_API_BASE))

# ------------------------
# Derived views
# ------------------------
batch = feed_state.batch
metrics = compute_metrics(batch)
alerts = filter_alerts(batch)
series = build_series(batch, window=SERIES_WINDOW, tz_name=LOCAL_TZ)
pager.recompute(alerts)

header_bits = ["<strong>Helmet Safety Overview</strong>", "<span class='chip-ok'>Live</span>"]
if feed_state.last_fetch:
    header_bits.append(f"Last updated: {datetime_label(feed_state.last_fetch.isoformat(), LOCAL_TZ)}")
    if batch and batch[0].get("timestamp"):
        header_bits.append(f"Latest reading: {html.escape(datetime_label(batch[0].get('timestamp'), LOCAL_TZ))}")
render_header_strip(" | ".join(header_bits))

if feed_state.error:
    st.error(f"Could not load data: {feed_state.error}. Check the API at {HELMET_API_BASE}")

ctx = {
    "state": feed_state,
    "batch": batch,
    "metrics": metrics,
    "alerts": alerts,
    "series": series,
    "series_window": SERIES_WINDOW,
    "pager": pager,
    "tz_name": LOCAL_TZ,
    "api_base": HELMET_API_BASE,
    "poll_interval": POLL_INTERVAL_SECONDS,
}

if st.session_state.page == "alerts":
    page_alerts.render(ctx)
elif st.session_state.page == "data":
    page_data.render(ctx)
else:
    page_overview.render(ctx)

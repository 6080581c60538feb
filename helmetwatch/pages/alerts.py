import streamlit as st

from helmetwatch.alert_feed import page_caption
from helmetwatch.ui.components.cards import alert_item


def render(ctx):
    pager = ctx["pager"]
    alerts = ctx.get("alerts") or []
    tz_name = ctx.get("tz_name")

    st.markdown("<div class='section-title'>Critical alerts (emergency + reason)</div>", unsafe_allow_html=True)
    window = pager.window
    if not alerts:
        st.info(page_caption(window, 0))
        return

    for record in window["items"]:
        alert_item(record, tz_name)

    info_col, prev_col, page_col, next_col = st.columns([3, 1, 1, 1])
    with info_col:
        st.caption(page_caption(window, len(alerts)))
    with prev_col:
        if st.button("Previous", key="alerts_prev", disabled=not pager.has_previous):
            pager.previous()
            st.rerun()
    with page_col:
        st.caption(f"Page {pager.page} of {pager.total_pages}")
    with next_col:
        if st.button("Next", key="alerts_next", disabled=not pager.has_next):
            pager.next()
            st.rerun()

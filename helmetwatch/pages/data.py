import pandas as pd
import streamlit as st

from helmetwatch.export import CSV_COLUMNS, export_csv, export_filename
from helmetwatch.series import datetime_label
from helmetwatch.ui.components.cards import status_card


def render(ctx):
    state = ctx["state"]
    snapshot = state.snapshot()
    tz_name = ctx.get("tz_name")

    st.markdown("<div class='section-title'>Data</div>", unsafe_allow_html=True)
    section = st.radio(
        "Data sections",
        ["Raw readings", "Status"],
        horizontal=True,
        label_visibility="collapsed",
    )

    if section == "Raw readings":
        content = export_csv(snapshot)
        st.download_button(
            "Export CSV",
            data=content or b"",
            file_name=export_filename(),
            mime="text/csv",
            disabled=content is None,
        )
        if not snapshot:
            st.info("No readings in the last fetch.")
            return
        st.dataframe(pd.DataFrame(snapshot, columns=list(CSV_COLUMNS)), use_container_width=True)
        return

    last_fetch = state.last_fetch.isoformat() if state.last_fetch else None
    status_card(
        "Status",
        [
            ("Service", ctx.get("api_base", "--")),
            ("Last fetch", datetime_label(last_fetch, tz_name)),
            ("Readings", str(len(snapshot))),
            ("Error", state.error or "--"),
            ("Poll interval", f"{ctx.get('poll_interval', '--')}s"),
        ],
    )

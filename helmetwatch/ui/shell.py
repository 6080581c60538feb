import streamlit as st

NAV_PAGES = ["overview", "alerts", "data"]


def render_left_rail(page: str, render_controls):
    with st.sidebar:
        selection = st.radio(
            "Navigation",
            NAV_PAGES,
            index=NAV_PAGES.index(page) if page in NAV_PAGES else 0,
            format_func=lambda opt: opt.title(),
            label_visibility="collapsed",
        )
        st.session_state.page = selection

        render_controls()


def render_header_strip(content_html: str):
    st.markdown(f"<div class='header-strip'>{content_html}</div>", unsafe_allow_html=True)

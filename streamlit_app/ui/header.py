"""
Top bar shared by the authenticated pages: brand, optional search, and the
identity menu (display name, email, Profile link, Sign out).
"""

from typing import Optional

import streamlit as st

from recipebook.controllers import Route
from recipebook.presenters import build_header

from utils.navigation import go_to
from utils.session import get_session_provider


def render_header(search_key: Optional[str] = None, placeholder: str = "Search recipes...") -> Optional[str]:
    """
    Render the header.

    Args:
        search_key: Widget key of the search box; no search box when None
        placeholder: Search box placeholder

    Returns:
        The current search text, or None when search is disabled
    """
    provider = get_session_provider()
    view = build_header(provider.identity)
    query = None

    col_brand, col_search, col_create, col_menu = st.columns([2, 5, 1, 1], vertical_alignment="center")

    with col_brand:
        if st.button("🍳 Recipe Book", key="header_home"):
            go_to(Route.FEED)

    if search_key:
        with col_search:
            query = st.text_input(
                "Search recipes",
                key=search_key,
                placeholder=placeholder,
                label_visibility="collapsed",
            )

    if view is None:
        return query

    with col_create:
        if st.button("➕", key="header_create", help="Create recipe"):
            go_to(Route.CREATE)

    with col_menu:
        with st.popover(view.initial):
            st.markdown(f"**{view.display_name}**")
            if view.email:
                st.caption(view.email)
            if st.button("👤 Profile", key="header_profile", use_container_width=True):
                go_to(Route.PROFILE)
            if st.button("Sign out", key="header_sign_out", use_container_width=True):
                provider.sign_out()
                go_to(Route.AUTH)

    return query

"""
Route to page mapping and deferred page switches.

st.switch_page() stops the script immediately, so controllers never call it
directly. They record the target with request_redirect() and the page calls
follow_redirect() at a safe point of the render.
"""

import streamlit as st

from recipebook.controllers import Route

PAGES = {
    Route.FEED: "app.py",
    Route.AUTH: "pages/00_🔑_Sign_In.py",
    Route.PROFILE: "pages/01_👤_Profile.py",
    Route.CREATE: "pages/02_➕_Create_Recipe.py",
}

REDIRECT_KEY = "pending_route"
CURRENT_ROUTE_KEY = "current_route"


def request_redirect(route: Route) -> None:
    st.session_state[REDIRECT_KEY] = route


def follow_redirect() -> None:
    """Switch to the requested page, if any. Does not return when it switches."""
    route = st.session_state.pop(REDIRECT_KEY, None)
    if route is not None:
        st.switch_page(PAGES[route])


def go_to(route: Route) -> None:
    request_redirect(route)
    follow_redirect()


def enter_page(route: Route) -> bool:
    """
    Record the page being rendered.

    Returns:
        True on the first render after arriving from another page
    """
    entering = st.session_state.get(CURRENT_ROUTE_KEY) != route
    st.session_state[CURRENT_ROUTE_KEY] = route
    return entering

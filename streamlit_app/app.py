"""
Recipe Book - Streamlit Frontend Main Entry Point (Recipe Feed).

Sets up page configuration and logging, then renders the community feed: every
recipe newest first, a name search in the header and a detail dialog.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Run with: streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import recipebook without installing it
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import recipebook.config  # noqa: F401

import streamlit as st

from recipebook.config import configure_logging
from recipebook.controllers import FeedController, Route
from ui.feedback import flush_notifications, show_empty_state, show_error
from ui.header import render_header
from ui.layout import page_header
from ui.recipe_card import render_recipe_grid
from ui.recipe_detail import show_recipe_detail
from ui.styles import load_global_styles
from utils.navigation import enter_page, follow_redirect
from utils.session import get_controller

configure_logging()

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Book",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="collapsed",
)

load_global_styles()
flush_notifications()

try:
    controller = get_controller(FeedController)
except RuntimeError as e:
    show_error(str(e), hint="Check PLATFORM_URL and PLATFORM_ANON_KEY in your .env file.")
    st.stop()

# Auth gate
if not controller.mount(entering=enter_page(Route.FEED)):
    follow_redirect()
    st.stop()

query = render_header(search_key="feed_search")
controller.set_query(query or "")

page_header(
    "Recipe Feed",
    subtitle="Discover delicious recipes from our community of home chefs",
)

cards = controller.cards
if not cards:
    show_empty_state("No recipes found", controller.empty_message)
else:
    clicked = render_recipe_grid(cards, key_prefix="feed")
    if clicked:
        controller.select_by_id(clicked)

# The dialog stays on screen until dismissed; the selection only opens it once
if controller.detail_open:
    show_recipe_detail(controller.selected)
    controller.close_detail()

follow_redirect()

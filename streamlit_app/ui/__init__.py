"""
UI Styling and Components Module.

This module provides global CSS styling and reusable UI components
for the Recipe Book Streamlit app.
"""

from ui.feedback import show_empty_state, show_error, working_spinner
from ui.layout import page_header, pill_tag
from ui.styles import load_global_styles

__all__ = [
    "load_global_styles",
    "page_header",
    "pill_tag",
    "show_empty_state",
    "show_error",
    "working_spinner",
]

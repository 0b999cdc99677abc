"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, pill tags and avatars.
"""

import html
from typing import Optional

import streamlit as st


def page_header(title: str, subtitle: Optional[str] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
    """
    st.markdown('<div class="rb-page-header">', unsafe_allow_html=True)
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="subtitle">{html.escape(subtitle)}</div>', unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


def pill_tag(text: str) -> str:
    """Return HTML for a small pill tag (render with unsafe_allow_html)."""
    return f'<span class="pill-tag">{html.escape(text)}</span>'


def avatar(initial: str, image_url: Optional[str] = None) -> None:
    """Render a round avatar: the image if there is one, else the initial."""
    if image_url:
        st.image(image_url, width=64)
    else:
        st.markdown(f'<div class="rb-avatar">{html.escape(initial)}</div>', unsafe_allow_html=True)

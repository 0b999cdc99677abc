"""
Standardized feedback utilities for toasts, error, empty and loading states.

Toasts raised by controllers are queued in st.session_state and shown on the
next render, so a message raised right before a page switch still appears on
the destination page.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st

from recipebook.controllers import Notification

NOTIFICATIONS_KEY = "pending_notifications"


def push_notification(notification: Notification) -> None:
    """Queue a toast for the next render."""
    st.session_state.setdefault(NOTIFICATIONS_KEY, []).append(notification)


def flush_notifications() -> None:
    """Show and clear every queued toast."""
    pending = st.session_state.pop(NOTIFICATIONS_KEY, [])
    for notification in pending:
        icon = "⚠️" if notification.is_error else "✅"
        body = f"**{notification.title}**"
        if notification.description:
            body = f"{body}  \n{notification.description}"
        st.toast(body, icon=icon)


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_empty_state(title: str, subtitle: Optional[str] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
    """
    st.info(f"🍽️ **{title}**")
    if subtitle:
        st.caption(subtitle)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Publishing…"):
            controller.submit()

    Args:
        label: Spinner label text (default: "Working…")
    """
    with st.spinner(label):
        yield

"""
Utility modules for the Streamlit frontend.

This package contains:
- navigation: Route to page mapping and deferred redirects
- session: Per-browser platform client, session provider and page controllers
"""

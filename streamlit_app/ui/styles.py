"""
Global CSS styling for Recipe Book.

load_global_styles() injects the same look on every page: warm typography,
pill buttons and bordered recipe cards.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Recipe Book app.

    This function:
    - Imports Google Fonts (Nunito) for friendly typography
    - Styles headings, buttons and recipe cards
    - Keeps recipe images at a fixed aspect ratio in the grid
    """
    css = """
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        html, body, [class*="css"] {
            font-family: 'Nunito', 'sans serif' !important;
        }

        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        h1 {
            font-size: 2.25rem !important;
            margin-bottom: 0.75rem !important;
        }

        hr {
            margin-top: 1rem !important;
            margin-bottom: 1rem !important;
        }

        .stButton > button {
            border-radius: 50px !important;
            box-shadow: 0 2px 6px rgba(217, 101, 48, 0.12) !important;
            transition: all 0.3s ease !important;
            font-weight: 600 !important;
        }

        .stButton > button:hover {
            box-shadow: 0 3px 10px rgba(217, 101, 48, 0.2) !important;
            transform: translateY(-1px) !important;
        }

        .main .block-container {
            max-width: 1200px !important;
            padding-top: 1.5rem !important;
            padding-bottom: 2.5rem !important;
        }

        /* Recipe card */
        .rb-card-title {
            font-size: 1.1rem !important;
            font-weight: 700 !important;
            margin: 0.5rem 0 0.25rem 0 !important;
        }

        .rb-card-meta {
            color: #666 !important;
            font-size: 0.85rem !important;
        }

        .rb-image-placeholder {
            aspect-ratio: 4 / 3;
            border-radius: 12px;
            background: linear-gradient(135deg, #fdebd3 0%, #f8d9c4 100%);
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 3rem;
        }

        [data-testid="stImage"] img {
            border-radius: 12px !important;
            aspect-ratio: 4 / 3;
            object-fit: cover;
        }

        .pill-tag {
            display: inline-block;
            padding: 0.2rem 0.7rem;
            border-radius: 50px;
            background: #FDEBD3;
            color: #D96530;
            font-size: 0.75rem;
            font-weight: 600;
            margin-right: 0.25rem;
        }

        .rb-page-header {
            margin-bottom: 1.25rem !important;
        }

        .rb-page-header .subtitle {
            color: #666 !important;
            font-size: 1rem !important;
        }

        .rb-avatar {
            width: 4rem;
            height: 4rem;
            border-radius: 50%;
            background: #D96530;
            color: #ffffff;
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 1.75rem;
            font-weight: 700;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)

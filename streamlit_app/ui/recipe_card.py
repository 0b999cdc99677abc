"""
Recipe card for the feed and profile grids.
"""

import html
from typing import List, Optional

import streamlit as st

from recipebook.presenters import RecipeCardView

from ui.layout import pill_tag
from utils.session import get_platform

GRID_COLUMNS = 3


def render_recipe_image(image_url: Optional[str]) -> None:
    """Show a recipe image, or a placeholder when there is none or it cannot be loaded."""
    source = get_platform().image_source(image_url) if image_url else None
    if source is None:
        st.markdown('<div class="rb-image-placeholder">🍽️</div>', unsafe_allow_html=True)
    else:
        st.image(source, use_container_width=True)


def render_recipe_card(card: RecipeCardView, key_prefix: str) -> bool:
    """
    Render one card.

    Returns:
        True if the card's open button was clicked
    """
    with st.container(border=True):
        render_recipe_image(card.image_url)
        st.markdown(f'<div class="rb-card-title">{html.escape(card.title)}</div>', unsafe_allow_html=True)

        meta = [f"by {html.escape(card.author)}"]
        if card.cooking_time_label:
            meta.append(f"⏱ {card.cooking_time_label}")
        st.markdown(f'<div class="rb-card-meta">{" · ".join(meta)}</div>', unsafe_allow_html=True)
        if card.category:
            st.markdown(pill_tag(card.category), unsafe_allow_html=True)

        return st.button("View recipe", key=f"{key_prefix}_open_{card.recipe_id}", use_container_width=True)


def render_recipe_grid(cards: List[RecipeCardView], key_prefix: str) -> Optional[str]:
    """
    Render cards in a grid.

    Returns:
        The recipe id whose open button was clicked, if any
    """
    clicked = None
    for start in range(0, len(cards), GRID_COLUMNS):
        cols = st.columns(GRID_COLUMNS, gap="medium")
        for col, card in zip(cols, cards[start:start + GRID_COLUMNS]):
            with col:
                if render_recipe_card(card, key_prefix):
                    clicked = card.recipe_id
    return clicked

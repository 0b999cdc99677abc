"""
Recipe detail dialog.
"""

from typing import Optional

import streamlit as st

from recipebook.models import Recipe
from recipebook.presenters import build_recipe_detail

from ui.layout import pill_tag
from ui.recipe_card import render_recipe_image


@st.dialog("Recipe", width="large")
def _recipe_dialog(recipe: Recipe) -> None:
    view = build_recipe_detail(recipe)

    st.markdown(f"## {view.title}")
    render_recipe_image(view.image_url)

    meta = [f"by **{view.author}**"]
    if view.cooking_time_label:
        meta.append(f"⏱ {view.cooking_time_label}")
    st.markdown(" · ".join(meta))
    if view.category:
        st.markdown(pill_tag(view.category), unsafe_allow_html=True)

    st.markdown("### Ingredients")
    st.markdown("\n".join(f"- {item}" for item in view.ingredients))

    st.markdown("### Instructions")
    st.markdown("\n".join(f"{number}. {text}" for number, text in view.steps))


def show_recipe_detail(recipe: Optional[Recipe]) -> None:
    """Open the detail dialog for recipe; does nothing when no recipe is selected."""
    if recipe is None:
        return
    _recipe_dialog(recipe)

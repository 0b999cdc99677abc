"""
View models for the recipe card, the recipe detail dialog and the header.

Pure functions from domain models to display-ready values, so the Streamlit
widgets only lay things out.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from recipebook.models import Identity, Recipe

UNKNOWN_AUTHOR = "Unknown"


@dataclass
class RecipeCardView:
    recipe_id: str
    title: str
    author: str
    image_url: Optional[str] = None
    cooking_time_label: Optional[str] = None
    category: Optional[str] = None


@dataclass
class RecipeDetailView:
    """
    Everything the detail dialog shows.

    Attributes:
        steps: Instructions as (number, text) pairs, numbered from 1 in input order
    """
    title: str
    author: str
    image_url: Optional[str] = None
    cooking_time_label: Optional[str] = None
    category: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    steps: List[Tuple[int, str]] = field(default_factory=list)


@dataclass
class HeaderView:
    display_name: str
    email: Optional[str]
    initial: str
    avatar_url: Optional[str] = None


def author_name(recipe: Recipe, fallback: Optional[str] = None) -> str:
    """Joined author username, else fallback, else "Unknown"."""
    return recipe.author_username or fallback or UNKNOWN_AUTHOR


def build_recipe_card(recipe: Recipe, author_fallback: Optional[str] = None) -> RecipeCardView:
    return RecipeCardView(
        recipe_id=recipe.id,
        title=recipe.name,
        author=author_name(recipe, author_fallback),
        image_url=recipe.image_url,
        cooking_time_label=f"{recipe.cooking_time} min" if recipe.cooking_time is not None else None,
        category=recipe.category,
    )


def build_recipe_detail(recipe: Optional[Recipe]) -> Optional[RecipeDetailView]:
    """
    Build the detail view for a selected recipe.

    Returns:
        None when no recipe is selected (the dialog renders nothing)
    """
    if recipe is None:
        return None
    return RecipeDetailView(
        title=recipe.name,
        author=author_name(recipe),
        image_url=recipe.image_url,
        cooking_time_label=f"{recipe.cooking_time} minutes" if recipe.cooking_time is not None else None,
        category=recipe.category,
        ingredients=list(recipe.ingredients),
        steps=[(index, text) for index, text in enumerate(recipe.instructions, start=1)],
    )


def build_header(identity: Optional[Identity]) -> Optional[HeaderView]:
    if identity is None:
        return None
    return HeaderView(
        display_name=identity.display_name,
        email=identity.email,
        initial=identity.initial,
        avatar_url=identity.avatar_url,
    )

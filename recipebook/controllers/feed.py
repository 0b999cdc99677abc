"""
Community feed: every recipe, newest first, with a client-side name search.
"""

import logging
from typing import List, Optional

from recipebook.controllers.base import PageController
from recipebook.models import Recipe
from recipebook.platform.base import PlatformError
from recipebook.presenters import RecipeCardView, build_recipe_card
from recipebook.recipes import fetch_feed, filter_recipes

logger = logging.getLogger(__name__)

EMPTY_SEARCH_MESSAGE = "Try a different search term"
EMPTY_FEED_MESSAGE = "Be the first to share a recipe!"


class FeedController(PageController):
    """Holds the fetched feed, the search query and the selected recipe."""

    def reset(self) -> None:
        self.recipes: List[Recipe] = []
        self.query: str = ""
        self.selected: Optional[Recipe] = None
        self.loaded = False

    def load(self) -> None:
        try:
            self.recipes = fetch_feed(self.platform)
        except PlatformError as e:
            logger.error("Error fetching recipes: %s", e.message)
            self.recipes = []
        self.loaded = True

    def set_query(self, query: str) -> None:
        self.query = query or ""

    @property
    def visible_recipes(self) -> List[Recipe]:
        return filter_recipes(self.recipes, self.query)

    @property
    def cards(self) -> List[RecipeCardView]:
        return [build_recipe_card(recipe) for recipe in self.visible_recipes]

    @property
    def empty_message(self) -> str:
        return EMPTY_SEARCH_MESSAGE if self.query else EMPTY_FEED_MESSAGE

    def select(self, recipe: Recipe) -> None:
        self.selected = recipe

    def select_by_id(self, recipe_id: str) -> None:
        self.selected = next((r for r in self.recipes if r.id == recipe_id), None)

    def close_detail(self) -> None:
        self.selected = None

    @property
    def detail_open(self) -> bool:
        return self.selected is not None

"""
Profile page: the caller's own recipes, with a confirmed delete.
"""

import logging
from typing import List, Optional

from recipebook.controllers.base import VARIANT_DESTRUCTIVE, Notification, PageController
from recipebook.models import Recipe
from recipebook.platform.base import PlatformError
from recipebook.presenters import RecipeCardView, build_recipe_card
from recipebook.recipes import delete_recipe, fetch_user_recipes

logger = logging.getLogger(__name__)

DELETED = Notification(title="Recipe deleted", description="Your recipe has been removed.")
DELETE_FAILED = Notification(
    title="Error",
    description="Failed to delete recipe. Please try again.",
    variant=VARIANT_DESTRUCTIVE,
)


def recipe_count_label(count: int) -> str:
    return f"{count} recipe shared" if count == 1 else f"{count} recipes shared"


class ProfileController(PageController):
    """
    Own recipes plus the delete flow.

    Delete is two-step: request_delete() stages a recipe id for confirmation,
    confirm_delete() issues the request. A successful delete drops the recipe
    from local state without refetching.
    """

    def reset(self) -> None:
        self.recipes: List[Recipe] = []
        self.pending_delete_id: Optional[str] = None
        self.selected: Optional[Recipe] = None
        self.loaded = False

    def load(self) -> None:
        try:
            self.recipes = fetch_user_recipes(self.platform, self.identity.id)
        except PlatformError as e:
            logger.error("Error fetching recipes for %s: %s", self.identity.id, e.message)
            self.recipes = []
        self.loaded = True

    @property
    def display_name(self) -> str:
        return self.identity.display_name if self.identity else ""

    @property
    def email(self) -> Optional[str]:
        return self.identity.email if self.identity else None

    @property
    def avatar_url(self) -> Optional[str]:
        return self.identity.avatar_url if self.identity else None

    @property
    def recipe_count_label(self) -> str:
        return recipe_count_label(len(self.recipes))

    @property
    def cards(self) -> List[RecipeCardView]:
        # own recipes: an unjoined author is the caller
        return [build_recipe_card(recipe, author_fallback=self.display_name) for recipe in self.recipes]

    def select(self, recipe: Recipe) -> None:
        self.selected = recipe

    def close_detail(self) -> None:
        self.selected = None

    @property
    def pending_delete(self) -> Optional[Recipe]:
        if self.pending_delete_id is None:
            return None
        return next((r for r in self.recipes if r.id == self.pending_delete_id), None)

    def request_delete(self, recipe_id: str) -> None:
        self.pending_delete_id = recipe_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    def confirm_delete(self) -> bool:
        """
        Delete the staged recipe.

        Returns:
            True if the recipe was removed, False on failure or when nothing is staged
        """
        recipe_id = self.pending_delete_id
        if recipe_id is None:
            return False
        self.pending_delete_id = None

        try:
            removed = delete_recipe(self.platform, recipe_id)
        except PlatformError as e:
            logger.error("Error deleting recipe %s: %s", recipe_id, e.message)
            self.notify(DELETE_FAILED)
            return False

        if not removed:
            logger.warning("Delete of recipe %s matched no rows", recipe_id)
        self.recipes = [r for r in self.recipes if r.id != recipe_id]
        if self.selected is not None and self.selected.id == recipe_id:
            self.selected = None
        self.notify(DELETED)
        return True

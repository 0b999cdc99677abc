"""
Create-recipe form state and submission.

Form lifecycle:

    EDITING -> VALIDATING -> INVALID -> (next edit) EDITING
                          -> VALID -> SUBMITTING -> FAILED -> (next edit) EDITING
                                                 -> SUCCEEDED (navigated to the profile)

Validation runs before any network call. Submission uploads the optional image
and then inserts the recipe; a failure in either step aborts with one toast.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from recipebook.controllers.base import (
    VARIANT_DESTRUCTIVE,
    Notification,
    PageController,
    Route,
)
from recipebook.models import RECIPE_CATEGORIES, ImageUpload, Recipe
from recipebook.platform.base import PlatformError
from recipebook.recipes import create_recipe
from recipebook.validation import validate_recipe_form

logger = logging.getLogger(__name__)

CREATED = Notification(
    title="Recipe created!",
    description="Your recipe has been published successfully.",
)
CREATE_FAILED = Notification(
    title="Error",
    description="Failed to create recipe. Please try again.",
    variant=VARIANT_DESTRUCTIVE,
)


class FormState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    INVALID = "invalid"
    VALID = "valid"
    SUBMITTING = "submitting"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


class CreateRecipeController(PageController):
    """Holds the raw form values, the per-field errors and the form state."""

    categories = RECIPE_CATEGORIES

    def reset(self) -> None:
        # bumped whenever the form is cleared or an entry is removed; the UI
        # derives widget keys from it so stale widget values are dropped
        self.revision: int = getattr(self, "revision", -1) + 1
        self.name: str = ""
        self.ingredients: List[str] = [""]
        self.instructions: List[str] = [""]
        self.cooking_time: str = ""
        self.category: str = ""
        self.image: Optional[ImageUpload] = None
        self.errors: Dict[str, str] = {}
        self.state = FormState.EDITING
        self.created: Optional[Recipe] = None

    def mount(self, entering: bool = False) -> bool:
        # coming back after a successful submit starts a fresh form
        if self.state is FormState.SUCCEEDED:
            self.reset()
        return super().mount(entering)

    @property
    def is_submitting(self) -> bool:
        return self.state is FormState.SUBMITTING

    def _edited(self) -> None:
        if self.state in (FormState.INVALID, FormState.FAILED):
            self.state = FormState.EDITING

    # Scalar fields

    def set_name(self, value: str) -> None:
        self.name = value
        self._edited()

    def set_cooking_time(self, value: str) -> None:
        self.cooking_time = value
        self._edited()

    def set_category(self, value: Optional[str]) -> None:
        self.category = value or ""
        self._edited()

    def set_image(self, image: Optional[ImageUpload]) -> None:
        self.image = image
        self._edited()

    # Ordered lists

    def add_ingredient(self) -> None:
        self.ingredients.append("")
        self._edited()

    def remove_ingredient(self, index: int) -> bool:
        """Remove by position; the last remaining entry cannot be removed."""
        if len(self.ingredients) <= 1:
            return False
        del self.ingredients[index]
        self.revision += 1
        self._edited()
        return True

    def update_ingredient(self, index: int, value: str) -> None:
        self.ingredients[index] = value
        self._edited()

    def add_instruction(self) -> None:
        self.instructions.append("")
        self._edited()

    def remove_instruction(self, index: int) -> bool:
        """Remove by position; the last remaining entry cannot be removed."""
        if len(self.instructions) <= 1:
            return False
        del self.instructions[index]
        self.revision += 1
        self._edited()
        return True

    def update_instruction(self, index: int, value: str) -> None:
        self.instructions[index] = value
        self._edited()

    # Submission

    def submit(self) -> bool:
        """
        Validate and publish the recipe.

        Returns:
            True if the recipe was created (the caller has been navigated to the
            profile), False if validation or the platform rejected it
        """
        if self.identity is None or self.state is FormState.SUBMITTING:
            return False

        self.state = FormState.VALIDATING
        recipe, errors = validate_recipe_form(
            name=self.name,
            ingredients=self.ingredients,
            instructions=self.instructions,
            cooking_time=self.cooking_time,
            category=self.category,
        )
        self.errors = errors
        if recipe is None:
            self.state = FormState.INVALID
            logger.debug("Recipe form invalid: %s", sorted(errors))
            return False
        self.state = FormState.VALID

        self.state = FormState.SUBMITTING
        try:
            self.created = create_recipe(self.platform, self.identity, recipe, image=self.image)
        except PlatformError as e:
            logger.error("Error creating recipe: %s", e.message)
            self.state = FormState.FAILED
            self.notify(CREATE_FAILED)
            return False

        self.state = FormState.SUCCEEDED
        self.notify(CREATED)
        self.navigate(Route.PROFILE)
        return True

"""
Page controllers.

Each controller owns the view state of one page and talks to the platform
through recipebook.recipes; the Streamlit pages only render and forward input.
"""

from recipebook.controllers.base import Notification, PageController, Route
from recipebook.controllers.create_recipe import CreateRecipeController, FormState
from recipebook.controllers.feed import FeedController
from recipebook.controllers.profile import ProfileController

__all__ = [
    "CreateRecipeController",
    "FeedController",
    "FormState",
    "Notification",
    "PageController",
    "ProfileController",
    "Route",
]

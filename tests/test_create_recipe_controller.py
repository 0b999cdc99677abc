"""
Tests for the create-recipe page controller.

This module tests CreateRecipeController including:
- Ordered list editing
- Validation before any network call
- The form state machine
- Successful and failed submissions
"""

from unittest.mock import patch

import pytest

from recipebook.controllers import CreateRecipeController, FormState, Route
from recipebook.controllers.create_recipe import CREATE_FAILED, CREATED
from recipebook.models import ImageUpload
from recipebook.platform.base import ConstraintViolationError
from recipebook.recipes import fetch_feed


@pytest.fixture
def controller(platform, sessions, navigate, notify):
    return CreateRecipeController(platform, sessions, navigate, notify)


@pytest.fixture
def mounted(controller, alice):
    assert controller.mount() is True
    return controller


def fill_tomato_soup(controller):
    controller.set_name("Tomato Soup")
    controller.update_ingredient(0, "2 tomatoes")
    controller.add_ingredient()
    controller.update_ingredient(1, "1 onion")
    controller.update_instruction(0, "Chop")
    controller.add_instruction()
    controller.update_instruction(1, "Simmer")
    controller.set_cooking_time("30")
    controller.set_category("Soup")


class TestInitialState:
    """Test cases for a fresh form."""

    def test_defaults(self, controller):
        assert controller.name == ""
        assert controller.ingredients == [""]
        assert controller.instructions == [""]
        assert controller.image is None
        assert controller.errors == {}
        assert controller.state is FormState.EDITING

    def test_signed_out_redirects(self, controller, navigate):
        assert controller.mount() is False
        navigate.assert_called_once_with(Route.AUTH)


class TestListEditing:
    """Test cases for ingredient and instruction lists."""

    def test_add_update_remove(self, mounted):
        mounted.update_ingredient(0, "flour")
        mounted.add_ingredient()
        mounted.update_ingredient(1, "sugar")
        mounted.add_ingredient()
        mounted.update_ingredient(2, "butter")

        assert mounted.remove_ingredient(1) is True
        assert mounted.ingredients == ["flour", "butter"]

    def test_last_entry_cannot_be_removed(self, mounted):
        assert mounted.remove_ingredient(0) is False
        assert mounted.remove_instruction(0) is False
        assert mounted.ingredients == [""]
        assert mounted.instructions == [""]

    def test_removal_bumps_revision(self, mounted):
        revision = mounted.revision
        mounted.add_instruction()
        assert mounted.revision == revision

        mounted.remove_instruction(0)
        assert mounted.revision == revision + 1

    def test_editing_does_not_validate(self, mounted):
        mounted.set_name("x")
        assert mounted.errors == {}
        assert mounted.state is FormState.EDITING


class TestValidation:
    """Test cases for invalid submissions."""

    def test_invalid_form_makes_no_network_call(self, mounted, platform, navigate, notify):
        mounted.set_name("ab")
        mounted.update_ingredient(0, "2 eggs")
        mounted.update_instruction(0, "Whisk")

        with patch.object(platform, "insert") as insert, patch.object(platform, "upload") as upload:
            assert mounted.submit() is False

        insert.assert_not_called()
        upload.assert_not_called()
        assert mounted.state is FormState.INVALID
        assert mounted.errors == {"name": "Recipe name must be at least 3 characters"}
        navigate.assert_not_called()
        notify.assert_not_called()

    def test_blank_ingredients_rejected(self, mounted):
        mounted.set_name("Omelette")
        mounted.add_ingredient()
        mounted.update_instruction(0, "Whisk")

        mounted.submit()

        assert mounted.errors == {"ingredients": "Add at least one ingredient"}

    def test_next_edit_returns_to_editing(self, mounted):
        mounted.submit()
        assert mounted.state is FormState.INVALID

        mounted.set_name("Omelette")

        assert mounted.state is FormState.EDITING
        # messages stay until the next submit
        assert "name" in mounted.errors


class TestSubmit:
    """Test cases for publishing."""

    def test_tomato_soup(self, mounted, platform, navigate, notify):
        """Test the full create flow ending on the profile page."""
        fill_tomato_soup(mounted)

        assert mounted.submit() is True

        assert mounted.state is FormState.SUCCEEDED
        assert mounted.errors == {}
        notify.assert_called_once_with(CREATED)
        navigate.assert_called_once_with(Route.PROFILE)

        feed = fetch_feed(platform)
        assert len(feed) == 1
        soup = feed[0]
        assert soup.name == "Tomato Soup"
        assert soup.ingredients == ["2 tomatoes", "1 onion"]
        assert soup.instructions == ["Chop", "Simmer"]
        assert soup.cooking_time == 30
        assert soup.category == "Soup"
        assert soup.author_username == "alice"

    def test_blank_lines_dropped(self, mounted, platform):
        mounted.set_name("Omelette")
        mounted.update_ingredient(0, "2 eggs")
        mounted.add_ingredient()
        mounted.add_ingredient()
        mounted.update_ingredient(2, "   ")
        mounted.update_instruction(0, "Whisk")

        mounted.submit()

        assert mounted.created.ingredients == ["2 eggs"]
        assert mounted.created.cooking_time is None
        assert mounted.created.category is None

    def test_blank_surrounded_ingredient_without_image(self, mounted, platform, navigate):
        """Test a form whose only ingredient sits between two blank rows."""
        mounted.set_name("Tomato Soup")
        mounted.add_ingredient()
        mounted.add_ingredient()
        mounted.update_ingredient(1, "2 tomatoes")
        mounted.update_instruction(0, "Boil water")
        mounted.set_cooking_time("20")
        mounted.set_category("Soup")

        assert mounted.ingredients == ["", "2 tomatoes", ""]
        assert mounted.submit() is True
        navigate.assert_called_once_with(Route.PROFILE)

        stored = fetch_feed(platform)
        assert [r.id for r in stored] == [mounted.created.id]
        soup = stored[0]
        assert soup.name == "Tomato Soup"
        assert soup.ingredients == ["2 tomatoes"]
        assert soup.instructions == ["Boil water"]
        assert soup.cooking_time == 20
        assert soup.category == "Soup"
        assert soup.image_url is None

    def test_with_image(self, mounted, platform, alice):
        fill_tomato_soup(mounted)
        mounted.set_image(ImageUpload(filename="soup.jpg", content=b"jpeg", content_type="image/jpeg"))

        mounted.submit()

        assert mounted.created.image_url.startswith(f"http://testserver/storage/recipe-images/{alice.id}/")
        assert platform.image_source(mounted.created.image_url) == b"jpeg"

    def test_platform_failure(self, mounted, platform, navigate, notify):
        fill_tomato_soup(mounted)

        with patch.object(platform, "insert", side_effect=ConstraintViolationError("violates foreign key", 409)):
            assert mounted.submit() is False

        assert mounted.state is FormState.FAILED
        notify.assert_called_once_with(CREATE_FAILED)
        assert CREATE_FAILED.description == "Failed to create recipe. Please try again."
        navigate.assert_not_called()
        # the form keeps its values for a retry
        assert mounted.name == "Tomato Soup"

        mounted.set_cooking_time("35")
        assert mounted.state is FormState.EDITING

    def test_submit_while_submitting_is_ignored(self, mounted, platform):
        fill_tomato_soup(mounted)
        mounted.state = FormState.SUBMITTING

        with patch.object(platform, "insert") as insert:
            assert mounted.submit() is False
        insert.assert_not_called()

    def test_returning_after_success_starts_fresh(self, mounted):
        fill_tomato_soup(mounted)
        mounted.submit()
        revision = mounted.revision

        assert mounted.mount(entering=True) is True

        assert mounted.state is FormState.EDITING
        assert mounted.name == ""
        assert mounted.ingredients == [""]
        assert mounted.revision == revision + 1

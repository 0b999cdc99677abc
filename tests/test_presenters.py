"""
Tests for view-model builders and identity display fields.
"""

from recipebook.models import AuthorRef, Identity, Recipe
from recipebook.presenters import UNKNOWN_AUTHOR, build_header, build_recipe_card, build_recipe_detail


def make_recipe(**overrides):
    values = {
        "id": "r1",
        "user_id": "u1",
        "name": "Tomato Soup",
        "ingredients": ["2 tomatoes", "1 onion"],
        "instructions": ["Chop", "Simmer", "Serve"],
        "cooking_time": 30,
        "category": "Soup",
        "profiles": AuthorRef(username="alice"),
    }
    values.update(overrides)
    return Recipe(**values)


class TestRecipeCard:
    """Test cases for card view models."""

    def test_card(self):
        card = build_recipe_card(make_recipe())
        assert card.title == "Tomato Soup"
        assert card.author == "alice"
        assert card.cooking_time_label == "30 min"
        assert card.category == "Soup"

    def test_unknown_author(self):
        card = build_recipe_card(make_recipe(profiles=None))
        assert card.author == UNKNOWN_AUTHOR == "Unknown"

    def test_author_fallback(self):
        card = build_recipe_card(make_recipe(profiles=None), author_fallback="me")
        assert card.author == "me"

    def test_zero_cooking_time_is_shown(self):
        assert build_recipe_card(make_recipe(cooking_time=0)).cooking_time_label == "0 min"
        assert build_recipe_card(make_recipe(cooking_time=None)).cooking_time_label is None


class TestRecipeDetail:
    """Test cases for the detail view model."""

    def test_no_recipe_renders_nothing(self):
        assert build_recipe_detail(None) is None

    def test_detail(self):
        view = build_recipe_detail(make_recipe())
        assert view.cooking_time_label == "30 minutes"
        assert view.ingredients == ["2 tomatoes", "1 onion"]
        assert view.steps == [(1, "Chop"), (2, "Simmer"), (3, "Serve")]
        assert view.author == "alice"

    def test_optional_fields_absent(self):
        view = build_recipe_detail(make_recipe(cooking_time=None, category=None, profiles=None))
        assert view.cooking_time_label is None
        assert view.category is None
        assert view.author == "Unknown"


class TestHeader:
    """Test cases for the header identity menu."""

    def test_signed_out(self):
        assert build_header(None) is None

    def test_username_from_metadata(self):
        view = build_header(Identity(id="u1", email="alice@example.com", metadata={"username": "chef"}))
        assert view.display_name == "chef"
        assert view.initial == "C"
        assert view.email == "alice@example.com"

    def test_display_name_fallbacks(self):
        assert Identity(id="u1", email="bob@example.com").display_name == "bob"
        assert Identity(id="u1").display_name == "User"
        assert Identity(id="u1", email="@example.com").display_name == "User"

    def test_avatar_from_metadata(self):
        identity = Identity(id="u1", metadata={"avatar_url": "https://x/a.png"})
        assert build_header(identity).avatar_url == "https://x/a.png"

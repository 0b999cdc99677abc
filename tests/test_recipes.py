"""
Tests for recipe operations.

This module tests recipebook.recipes including:
- Feed and own-recipe reads (ordering, author join)
- Client-side name search
- Image key naming
- Create (upload then insert) and delete
"""

import logging
from unittest.mock import Mock, patch

import pytest

from recipebook.models import ImageUpload, Recipe
from recipebook.platform.base import ConstraintViolationError, DataPlatform, PlatformUnavailableError
from recipebook.recipes import (
    build_image_key,
    create_recipe,
    delete_recipe,
    fetch_feed,
    fetch_user_recipes,
    filter_recipes,
)
from recipebook.validation import validate_recipe_form


def valid_input(name="Tomato Soup", **overrides):
    values = {
        "name": name,
        "ingredients": ["2 tomatoes", "1 onion"],
        "instructions": ["Chop", "Simmer"],
        "cooking_time": "30",
        "category": "Soup",
    }
    values.update(overrides)
    recipe, errors = validate_recipe_form(**values)
    assert errors == {}
    return recipe


def recipe(name, recipe_id=None):
    return Recipe(id=recipe_id or name, user_id="u1", name=name)


class TestFilterRecipes:
    """Test cases for the client-side name search."""

    def setup_method(self):
        self.recipes = [recipe("Apple Pie"), recipe("Tomato Soup"), recipe("Apple Crumble")]

    def test_case_insensitive_substring(self):
        """Test that "apple" matches both apple recipes in their original order."""
        names = [r.name for r in filter_recipes(self.recipes, "apple")]
        assert names == ["Apple Pie", "Apple Crumble"]

    def test_upper_case_query(self):
        names = [r.name for r in filter_recipes(self.recipes, "APPLE")]
        assert names == ["Apple Pie", "Apple Crumble"]

    def test_empty_query_returns_all(self):
        assert filter_recipes(self.recipes, "") == self.recipes
        assert filter_recipes(self.recipes, None) == self.recipes

    def test_no_match(self):
        assert filter_recipes(self.recipes, "lasagne") == []


class TestBuildImageKey:
    """Test cases for storage key naming."""

    def test_key_has_owner_prefix_and_extension(self):
        assert build_image_key("u1", "photo.jpg", now_ms=1700000000000) == "u1/1700000000000.jpg"

    def test_last_extension_wins(self):
        assert build_image_key("u1", "archive.tar.gz", now_ms=5) == "u1/5.gz"

    def test_no_extension(self):
        """Test that a filename without a dot produces a key without a suffix."""
        assert build_image_key("u1", "photo", now_ms=5) == "u1/5"

    def test_defaults_to_current_time(self):
        with patch("recipebook.recipes.time.time", return_value=1700000000.5):
            assert build_image_key("u1", "a.png") == "u1/1700000000500.png"


class TestFetch:
    """Test cases for feed and own-recipe reads."""

    def test_tomato_soup_appears_in_feed(self, platform, alice):
        """Test that a created recipe shows up in the feed with its author."""
        create_recipe(platform, alice, valid_input())

        feed = fetch_feed(platform)
        assert len(feed) == 1
        soup = feed[0]
        assert soup.name == "Tomato Soup"
        assert soup.ingredients == ["2 tomatoes", "1 onion"]
        assert soup.instructions == ["Chop", "Simmer"]
        assert soup.cooking_time == 30
        assert soup.category == "Soup"
        assert soup.image_url is None
        assert soup.author_username == "alice"

    def test_feed_is_newest_first(self, platform, alice):
        for name in ("First", "Second", "Third"):
            create_recipe(platform, alice, valid_input(name=name))

        assert [r.name for r in fetch_feed(platform)] == ["Third", "Second", "First"]

    def test_feed_includes_other_users(self, platform, alice, bob_platform, recipe_record):
        bob_id = bob_platform.caller_id
        bob_platform.insert("recipes", recipe_record(bob_id, name="Bob's Stew"))
        create_recipe(platform, alice, valid_input())

        feed = fetch_feed(platform)
        assert {r.author_username for r in feed} == {"alice", "bob"}

    def test_user_recipes_only_returns_owner_rows(self, platform, alice, bob_platform, recipe_record):
        bob_platform.insert("recipes", recipe_record(bob_platform.caller_id, name="Bob's Stew"))
        create_recipe(platform, alice, valid_input())

        mine = fetch_user_recipes(platform, alice.id)
        assert [r.name for r in mine] == ["Tomato Soup"]

    def test_malformed_rows_are_skipped(self, caplog):
        rows = [
            {"id": "r1", "user_id": "u1", "name": "Soup", "ingredients": ["x"], "instructions": ["y"]},
            {"user_id": "u1", "name": "No id"},
        ]
        source = Mock(spec=DataPlatform)
        source.select.return_value = rows

        with caplog.at_level(logging.WARNING, logger="recipebook.recipes"):
            feed = fetch_feed(source)

        assert [r.id for r in feed] == ["r1"]
        assert "Skipping malformed recipe row" in caplog.text

    def test_fetch_failure_propagates(self):
        failing = Mock(spec=DataPlatform)
        failing.select.side_effect = PlatformUnavailableError("down")
        with pytest.raises(PlatformUnavailableError):
            fetch_feed(failing)


class TestCreateRecipe:
    """Test cases for upload-then-insert."""

    def test_with_image(self, platform, alice):
        """Test that the image is stored under the owner's prefix and referenced by URL."""
        image = ImageUpload(filename="soup.png", content=b"\x89PNG", content_type="image/png")

        created = create_recipe(platform, alice, valid_input(), image=image)

        prefix = f"http://testserver/storage/recipe-images/{alice.id}/"
        assert created.image_url.startswith(prefix)
        assert created.image_url.endswith(".png")
        assert platform.image_source(created.image_url) == b"\x89PNG"

    def test_custom_bucket(self, platform, alice):
        image = ImageUpload(filename="soup.png", content=b"img")
        created = create_recipe(platform, alice, valid_input(), image=image, bucket="other")
        assert "/other/" in created.image_url

    def test_upload_failure_skips_insert(self, alice):
        """Test that nothing is inserted when the upload fails."""
        failing = Mock(spec=DataPlatform)
        failing.upload.side_effect = ConstraintViolationError("The resource already exists", 409)
        image = ImageUpload(filename="soup.png", content=b"img")

        with pytest.raises(ConstraintViolationError):
            create_recipe(failing, alice, valid_input(), image=image)

        failing.insert.assert_not_called()

    def test_insert_failure_leaves_uploaded_image(self, alice):
        """Test that a failed insert is reported and the upload is not undone."""
        failing = Mock(spec=DataPlatform)
        failing.get_public_url.return_value = "http://cdn/recipe-images/x.png"
        failing.insert.side_effect = PlatformUnavailableError("down")
        image = ImageUpload(filename="soup.png", content=b"img")

        with pytest.raises(PlatformUnavailableError):
            create_recipe(failing, alice, valid_input(), image=image)

        failing.upload.assert_called_once()
        failing.delete.assert_not_called()
        inserted = failing.insert.call_args[0][1]
        assert inserted["image_url"] == "http://cdn/recipe-images/x.png"
        assert inserted["user_id"] == alice.id


class TestDeleteRecipe:
    """Test cases for delete."""

    def test_delete_removes_recipe(self, platform, alice):
        created = create_recipe(platform, alice, valid_input())

        assert delete_recipe(platform, created.id) is True
        assert fetch_feed(platform) == []

    def test_delete_twice_is_noop(self, platform, alice):
        created = create_recipe(platform, alice, valid_input())
        delete_recipe(platform, created.id)

        assert delete_recipe(platform, created.id) is False

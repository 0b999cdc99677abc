"""
Recipe operations against the platform.

Thin pass-through functions used by the page controllers:
- fetch_feed / fetch_user_recipes: newest-first reads joined with the author's username
- filter_recipes: client-side, case-insensitive substring search on names
- create_recipe: optional image upload followed by a single insert
- delete_recipe: delete scoped to one recipe id

# NOTE: create_recipe performs two independent fallible steps. If the insert fails
    after the upload succeeded, the uploaded image stays orphaned in storage.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from recipebook.config import StorageConfig
from recipebook.models import Identity, ImageUpload, Recipe, file_extension
from recipebook.platform.base import DataPlatform, Join
from recipebook.validation import RecipeInput

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"
AUTHOR_JOIN = Join(table="profiles", columns=("username",))


def fetch_feed(platform: DataPlatform) -> List[Recipe]:
    """
    Fetch every recipe, newest first, with the author's username.

    Raises:
        PlatformError: If the read fails (callers decide how to degrade)
    """
    rows = platform.select(
        RECIPES_TABLE,
        join=AUTHOR_JOIN,
        order_by="created_at",
        ascending=False,
    )
    return _parse_rows(rows)


def fetch_user_recipes(platform: DataPlatform, user_id: str) -> List[Recipe]:
    """Fetch one owner's recipes, newest first, with the author's username."""
    rows = platform.select(
        RECIPES_TABLE,
        eq={"user_id": user_id},
        join=AUTHOR_JOIN,
        order_by="created_at",
        ascending=False,
    )
    return _parse_rows(rows)


def _parse_rows(rows: Iterable[Dict[str, Any]]) -> List[Recipe]:
    """Validate fetched rows, skipping (and logging) any that do not fit Recipe."""
    recipes = []
    for row in rows:
        try:
            recipes.append(Recipe.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed recipe row %s: %s", row.get("id"), e)
    return recipes


def filter_recipes(recipes: Iterable[Recipe], query: str) -> List[Recipe]:
    """
    Keep recipes whose name contains query, ignoring case.

    An empty query keeps everything. Order is preserved.
    """
    needle = (query or "").casefold()
    if not needle:
        return list(recipes)
    return [recipe for recipe in recipes if needle in recipe.name.casefold()]


def build_image_key(user_id: str, filename: str, now_ms: Optional[int] = None) -> str:
    """
    Build the storage key for a recipe image: "{user_id}/{epoch_ms}.{ext}".

    The owner prefix namespaces uploads per user and the timestamp avoids
    collisions between uploads of the same user. Filenames without an extension
    produce a key without a suffix.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = file_extension(filename)
    return f"{user_id}/{now_ms}.{ext}" if ext else f"{user_id}/{now_ms}"


def create_recipe(
    platform: DataPlatform,
    owner: Identity,
    recipe: RecipeInput,
    image: Optional[ImageUpload] = None,
    bucket: Optional[str] = None,
) -> Recipe:
    """
    Publish a recipe for owner.

    Args:
        platform: DataPlatform acting as owner
        owner: The signed-in identity; becomes the recipe's user_id
        recipe: Validated form values
        image: Optional image to upload first
        bucket: Storage bucket (defaults to RECIPE_IMAGES_BUCKET)

    Returns:
        The stored recipe

    Raises:
        PlatformError: If the upload or the insert fails. Nothing is inserted when
            the upload fails; an uploaded image is not removed when the insert fails.
    """
    image_url = None
    if image is not None:
        bucket = bucket or StorageConfig.get_recipe_images_bucket()
        key = build_image_key(owner.id, image.filename)
        platform.upload(bucket, key, image.content, content_type=image.content_type)
        image_url = platform.get_public_url(bucket, key)
        logger.debug("Uploaded recipe image to %s/%s", bucket, key)

    row = platform.insert(
        RECIPES_TABLE,
        {
            "user_id": owner.id,
            "name": recipe.name,
            "image_url": image_url,
            "ingredients": recipe.ingredients,
            "instructions": recipe.instructions,
            "cooking_time": recipe.cooking_time,
            "category": recipe.category,
        },
    )
    created = Recipe.model_validate(row)
    logger.info("Created recipe %s for %s", created.id, owner.id)
    return created


def delete_recipe(platform: DataPlatform, recipe_id: str) -> bool:
    """
    Delete one recipe by id.

    Returns:
        True if a row was deleted, False if it was already gone or not owned

    Raises:
        PlatformError: If the request fails
    """
    deleted = platform.delete(RECIPES_TABLE, eq={"id": recipe_id})
    logger.info("Deleted recipe %s (%d row(s))", recipe_id, len(deleted))
    return bool(deleted)

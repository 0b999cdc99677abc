"""
Recipe form validation.

The create form collects raw strings; validate_recipe_form() turns them into a
RecipeInput or a field -> message dict. The name is length-checked as typed
(surrounding spaces count) and must not be all whitespace. Blank ingredient and
instruction lines are dropped (order and original text of the rest are kept)
before the shape is checked, so a form with only blank lines fails the
"at least one" rule.

Nothing here touches the network.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100

# (field, pydantic error type) -> user-facing message
FIELD_MESSAGES: Dict[Tuple[str, str], str] = {
    ("name", "string_too_short"): "Recipe name must be at least 3 characters",
    ("name", "string_too_long"): "Recipe name too long",
    ("name", "value_error"): "Recipe name cannot be blank",
    ("ingredients", "too_short"): "Add at least one ingredient",
    ("instructions", "too_short"): "Add at least one instruction",
    ("cooking_time", "int_parsing"): "Cooking time must be a whole number",
    ("cooking_time", "int_from_float"): "Cooking time must be a whole number",
    ("cooking_time", "int_type"): "Cooking time must be a whole number",
    ("cooking_time", "greater_than_equal"): "Cooking time cannot be negative",
}


class RecipeInput(BaseModel):
    """A validated recipe ready to be inserted (owner and image are added later)."""
    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    cooking_time: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("blank name")
        return value

    @field_validator("cooking_time", mode="before")
    @classmethod
    def _blank_cooking_time(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


def clean_lines(lines: List[str]) -> List[str]:
    """Drop entries that are empty after trimming; keep order and original text."""
    return [line for line in lines if line and line.strip()]


def validate_recipe_form(
    name: str,
    ingredients: List[str],
    instructions: List[str],
    cooking_time: Optional[str] = None,
    category: Optional[str] = None,
) -> Tuple[Optional[RecipeInput], Dict[str, str]]:
    """
    Validate raw form values.

    Args:
        name: Recipe name as typed
        ingredients: Ingredient lines as typed (may contain blanks)
        instructions: Instruction lines as typed (may contain blanks)
        cooking_time: Cooking time text in minutes, optional
        category: Selected category, optional (not checked against RECIPE_CATEGORIES)

    Returns:
        (RecipeInput, {}) when valid, (None, {field: message}) otherwise.
        Only the first message per field is kept.
    """
    try:
        recipe = RecipeInput(
            name=name or "",
            ingredients=clean_lines(ingredients),
            instructions=clean_lines(instructions),
            cooking_time=cooking_time,
            category=category,
        )
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            if not error.get("loc"):
                continue
            field = str(error["loc"][0])
            if field in errors:
                continue
            errors[field] = FIELD_MESSAGES.get((field, error["type"]), error["msg"])
        return None, errors

    return recipe, {}

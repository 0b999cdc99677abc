"""
Recipe, profile and identity models.

These are the canonical shapes exchanged between the platform client, the page
controllers and the UI. Rows coming back from the platform are plain dicts and
are validated into these models at the call site.

# NOTE: Recipe.profiles mirrors the read-time join `profiles(username)`. It is
    None when the author's profile could not be joined.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Client-side suggestions only; the backend never checks category values.
RECIPE_CATEGORIES: List[str] = [
    "Breakfast",
    "Lunch",
    "Dinner",
    "Dessert",
    "Snack",
    "Appetizer",
    "Soup",
    "Salad",
    "Vegetarian",
    "Vegan",
]

DEFAULT_DISPLAY_NAME = "User"


def file_extension(filename: str) -> Optional[str]:
    """Return the text after the last dot of a filename, or None if there is none."""
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1] or None


def email_local_part(email: Optional[str]) -> Optional[str]:
    """Return the part of an email address before '@', or None if empty."""
    if not email:
        return None
    local = email.split("@")[0]
    return local or None


class AuthorRef(BaseModel):
    """Joined author columns (`profiles(username)`)."""
    username: str


class Recipe(BaseModel):
    """A published recipe, optionally joined with its author's username."""
    id: str = Field(..., description="Opaque unique identifier")
    user_id: str = Field(..., description="Owner identity id")
    name: str
    image_url: Optional[str] = Field(None, description="Public URL of the stored image")
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    cooking_time: Optional[int] = Field(None, description="Minutes")
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profiles: Optional[AuthorRef] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def author_username(self) -> Optional[str]:
        return self.profiles.username if self.profiles else None


class Profile(BaseModel):
    """Public profile row, created once per identity at signup."""
    id: str
    user_id: str
    username: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")


class Identity(BaseModel):
    """
    The authenticated user as reported by the auth provider.

    Attributes:
        id: Opaque identity reference (owner id on rows)
        email: Sign-in email
        metadata: Free-form user metadata (e.g. username, avatar_url)
    """
    id: str
    email: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        username = self.metadata.get("username")
        if username:
            return str(username)
        return email_local_part(self.email) or DEFAULT_DISPLAY_NAME

    @property
    def avatar_url(self) -> Optional[str]:
        return self.metadata.get("avatar_url")

    @property
    def initial(self) -> str:
        return self.display_name[:1].upper()


class AuthSession(BaseModel):
    """A signed-in session: bearer token plus the identity it belongs to."""
    access_token: str
    refresh_token: Optional[str] = None
    identity: Identity


class ImageUpload(BaseModel):
    """An image file picked in the create form, held in memory until submit."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> Optional[str]:
        return file_extension(self.filename)

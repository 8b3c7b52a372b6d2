"""
Pydantic models for users and login tokens.

Password hashes are stored with the user record but never leave the
service layer: ``UserRead`` has no password field.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a user.

    ``password`` is optional.  Users registered without one log in with
    the shared password from the settings.
    """

    username: str = ""
    favorite_genre: Optional[str] = Field(None, description="Genre used for recommendations")
    password: Optional[str] = None


class UserRead(BaseModel):
    """Schema for reading a user."""

    id: str
    username: str
    favorite_genre: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserRead":
        return cls(id=record["id"], username=record["username"], favorite_genre=record.get("favorite_genre"))


class Token(BaseModel):
    """A signed token issued at login."""

    value: str

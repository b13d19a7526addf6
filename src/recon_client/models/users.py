"""User and role data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Role(BaseModel):
    id: int
    role_name: str = Field(alias="roleName")

    model_config = {"populate_by_name": True}


class User(BaseModel):
    id: int
    username: str
    email: str = ""
    role_name: str | None = Field(default=None, alias="roleName")

    model_config = {"populate_by_name": True, "extra": "allow"}


class UserCreate(BaseModel):
    username: str
    email: str
    password: str
    role_name: str = Field(alias="roleName")

    model_config = {"populate_by_name": True}


class UserUpdate(BaseModel):
    """Partial update; unset fields are not sent."""
    username: str | None = None
    email: str | None = None
    password: str | None = None
    current_password: str | None = Field(default=None, alias="currentPassword")
    role_name: str | None = Field(default=None, alias="roleName")

    model_config = {"populate_by_name": True}

"""Schemas for profile and admin user endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.auth import CamelModel


class Address(BaseModel):
    """Postal address; every part optional."""

    model_config = ConfigDict(extra="ignore")

    street: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=255)
    state: str | None = Field(default=None, max_length=255)
    zip: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=255)


class UserProfile(CamelModel):
    """A user's record as returned by /me and /admin/users (no password hash or tokens)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    phone: str = ""
    addresses: list[Address] = Field(default_factory=list)
    created_at: datetime | None = None


class ProfileUpdate(CamelModel):
    """Body for PUT /me; omitted or empty name/phone leave the stored value unchanged."""

    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    addresses: list[Address] | None = Field(default=None, max_length=50)

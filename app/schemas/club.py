# app/schemas/club.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, HttpUrl, TypeAdapter, field_validator
from sqlmodel import SQLModel, Field

_http_url = TypeAdapter(HttpUrl)


def check_url(v: str) -> str:
    """Validate an http(s) URL but keep the caller's exact string."""
    try:
        _http_url.validate_python(v)
    except ValueError:
        raise ValueError("must be a valid URL")
    return v


def optional_url(v: str | None) -> str | None:
    """Like check_url, but "" clears the field."""
    if v is None:
        return v
    v = v.strip()
    if not v:
        return None
    return check_url(v)


class ClubCreate(SQLModel):
    """
    Payload for creating a club (admin only).

    - map_url may be sent as "" to mean "no map link".
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    address: str | None = None
    map_url: str | None = None
    description: str | None = None
    image_url: str

    @field_validator("name", "location")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("map_url")
    @classmethod
    def validate_map_url(cls, v: str | None) -> str | None:
        return optional_url(v)


class ClubUpdate(SQLModel):
    """
    Partial update payload for clubs.
    Only fields present in the body are applied; each is validated
    with the same rules as ClubCreate.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    address: str | None = None
    map_url: str | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("name", "location", "image_url")
    @classmethod
    def not_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("map_url")
    @classmethod
    def validate_map_url(cls, v: str | None) -> str | None:
        return optional_url(v)


class ClubSummary(SQLModel):
    """Compact club info embedded in event listings."""

    id: uuid.UUID
    name: str
    address: str | None = None
    map_url: str | None = None


class ClubRead(SQLModel):
    id: uuid.UUID
    name: str
    location: str
    address: str | None = None
    map_url: str | None = None
    description: str | None = None
    image_url: str
    email: str | None = None
    created_at: datetime


class ClubListItem(ClubRead):
    event_count: int


class ClubCredentials(SQLModel):
    """Club-portal login. The password is shown exactly once."""

    email: str
    password: str

"""
Pydantic models used for request/response validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. JSON field names are
camelCase; Python attributes are snake_case with aliases.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from boxcloud.database.entities.box import BoxStatus


class FileRec(BaseModel):
    """Metadata for a file staged into the upload directory."""
    original: str = Field(..., description="Original filename as provided by the client.", examples=["report.pdf"])
    filename: str = Field(..., description="Generated storage key.", examples=["9f1c2d4e-7a3b-4c5d-8e9f-0a1b2c3d4e5f-1714032000000.pdf"])
    path: str = Field(..., description="Storage key relative to the upload directory (same as filename).")
    size: int = Field(0, description="Size of the stored file in bytes.")
    mime: str = Field(..., description="MIME type of the file.", examples=["application/pdf"])


class RegisterRequest(BaseModel):
    """
    Registration form. Fields are optional at the schema level so that a
    missing field is reported as "Missing required fields" rather than a
    generic validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    license_code: Optional[str] = Field(None, alias="licenseCode")


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class BoxRequest(BaseModel):
    """
    Body of box create/update requests.

    Update is a full replace: an absent `retentionDate` clears the date and an
    absent `status` resets it to `active`.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    """Box name; trimmed, must not be empty."""
    retention_date: Optional[date] = Field(None, alias="retentionDate")
    """Optional disposal date (YYYY-MM-DD)."""
    status: Optional[BoxStatus] = None
    """One of owned, restricted, borrowed, active."""

    @field_validator("retention_date", "status", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        # HTML forms send "" for an untouched date or select.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TitleRequest(BaseModel):
    title: Optional[str] = None


class AuthenticatedUser(BaseModel):
    """The caller resolved from a bearer token."""
    id: str
    email: str
    name: str

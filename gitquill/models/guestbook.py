"""Guestbook models for gitquill."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GuestbookEntryRequest(BaseModel):
    """A visitor's guestbook entry with its arithmetic CAPTCHA."""

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    num1: Optional[int] = None
    num2: Optional[int] = None
    verification: Optional[str] = None
    name: Optional[str] = None
    website: Optional[str] = None
    image_data: Optional[str] = Field(default=None, alias="imageData")
    image_name: Optional[str] = Field(default=None, alias="imageName")

    @field_validator("verification", mode="before")
    @classmethod
    def coerce_verification(cls, v: Any) -> Optional[str]:
        """Forms send the answer as a string, JSON clients may send a number."""
        if v is None:
            return None
        return str(v)


class GuestbookResult(BaseModel):
    """A committed guestbook entry."""

    message: str = "Thank you! Your entry has been submitted."
    path: str = Field(..., exclude=True)
    url: Optional[str] = Field(default=None, exclude=True)

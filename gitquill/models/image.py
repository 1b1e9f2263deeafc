"""Image upload models for gitquill."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageUploadRequest(BaseModel):
    """Standalone image upload as posted by the editor."""

    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    image_data: Optional[str] = Field(default=None, alias="imageData")
    image_name: Optional[str] = Field(default=None, alias="imageName")
    image_path: Optional[str] = Field(default=None, alias="imagePath")


class ImageUploadResult(BaseModel):
    """A committed image asset."""

    message: str = "Image uploaded successfully!"
    unique_image_name: str = Field(..., serialization_alias="uniqueImageName")
    path: str
    url: Optional[str] = None
    commit_sha: Optional[str] = Field(default=None, exclude=True)

"""
API Response Schemas using Pydantic.

Structure of the records LaunchPad returns to callers and publishes to
subscribers.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the category")
    name: str = Field(..., description="Name of the category")
    description: Optional[str] = Field(None, description="Category description")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")


class StartupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the startup")
    name: str = Field(..., description="Name of the startup")
    tagline: str = Field(..., description="One-line pitch")
    description: str = Field(..., description="Long description")
    url: str = Field(..., description="Website URL")
    category_id: Optional[int] = Field(None, description="ID of the category")
    category_name: Optional[str] = Field(None, description="Name of the category")
    upvotes: int = Field(0, description="Number of upvotes")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @classmethod
    def from_model(cls, startup: Any) -> "StartupOut":
        record = cls.model_validate(startup)
        if startup.category is not None:
            record.category_name = startup.category.name
        return record


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the comment")
    startup_id: int = Field(..., description="ID of the startup commented on")
    author: str = Field(..., description="Author display name")
    content: str = Field(..., description="Comment text")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

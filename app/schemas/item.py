# Todo item schema
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """Stored document shape; `isComplete` is the field name in Cosmos."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    completed: bool = Field(default=False, alias="isComplete")


class ItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    completed: bool = Field(default=False, alias="isComplete")


class ItemUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = Field(default=None, alias="isComplete")

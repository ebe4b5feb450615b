from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.schemas.tag import TagResponse

class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)

class ItemCreate(ItemBase):
    parent_id: Optional[int] = Field(None, alias="parent")

    model_config = {"populate_by_name": True}

class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    parent_id: Optional[int] = Field(None, alias="parent")
    tags: Optional[List[int]] = None

    model_config = {"populate_by_name": True}

class ItemResponse(ItemBase):
    id: int
    backpack_id: str
    added_at: datetime
    user_email: str
    parent_id: Optional[int] = None
    tags: List[TagResponse] = []

    class Config:
        from_attributes = True

class ItemListResponse(BaseModel):
    items: List[ItemResponse]

# catalog/schemas/item.py
from datetime import datetime
from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)


class ItemOut(BaseModel):
    id: str
    inventory_id: str
    name: str
    description: str
    created_at: datetime
    likes: int = 0

    class Config:
        from_attributes = True


class LikeOut(BaseModel):
    likes: int

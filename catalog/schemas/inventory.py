# catalog/schemas/inventory.py
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from catalog.schemas.item import ItemOut
from catalog.schemas.user import UserOut


class InventoryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    category: str = Field(default="Other", min_length=1, max_length=100)
    is_public: bool = False


class InventoryUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    is_public: Optional[bool] = None


class InventoryOut(BaseModel):
    id: str
    title: str
    description: str
    category: str
    owner_id: int
    created_at: datetime
    is_public: bool

    class Config:
        from_attributes = True


class InventoryStats(BaseModel):
    total_items: int
    total_likes: int
    most_liked_item_id: Optional[str] = None
    most_liked_item_name: Optional[str] = None
    latest_item_id: Optional[str] = None
    latest_item_name: Optional[str] = None


class InventoryDetailsOut(BaseModel):
    inventory: InventoryOut
    is_owner: bool
    can_edit: bool
    items: List[ItemOut] = []
    users_with_access: List[UserOut] = []  # only populated for the owner
    stats: InventoryStats

# catalog/schemas/search.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    type: Literal["Inventory", "Item"]
    id: str
    inventory_id: Optional[str] = None  # parent inventory, items only
    title: str
    snippet: str
    rank: float


class SearchPage(BaseModel):
    query: str = ""
    results: List[SearchResult] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_count: int = 0

# catalog/services/statistics.py
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.models.item import Item, ItemLike
from catalog.schemas.inventory import InventoryStats


class StatisticsService:
    def __init__(self, db: Session):
        self.db = db

    def total_items(self, inventory_id: str) -> int:
        return self.db.execute(
            select(func.count(Item.id)).where(Item.inventory_id == inventory_id)
        ).scalar() or 0

    def total_likes(self, inventory_id: str) -> int:
        return self.db.execute(
            select(func.count(ItemLike.id))
            .join(Item, Item.id == ItemLike.item_id)
            .where(Item.inventory_id == inventory_id)
        ).scalar() or 0

    def most_liked_item(self, inventory_id: str) -> Optional[Item]:
        """Item with the most likes; None when nothing has been liked."""
        like_count = func.count(ItemLike.id).label("like_count")
        row = self.db.execute(
            select(Item, like_count)
            .join(ItemLike, ItemLike.item_id == Item.id)
            .where(Item.inventory_id == inventory_id)
            .group_by(Item.id)
            .order_by(like_count.desc(), Item.created_at.asc())
            .limit(1)
        ).first()
        return row[0] if row else None

    def latest_item(self, inventory_id: str) -> Optional[Item]:
        return self.db.execute(
            select(Item)
            .where(Item.inventory_id == inventory_id)
            .order_by(Item.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()

    def summary(self, inventory_id: str) -> InventoryStats:
        most_liked = self.most_liked_item(inventory_id)
        latest = self.latest_item(inventory_id)
        return InventoryStats(
            total_items=int(self.total_items(inventory_id)),
            total_likes=int(self.total_likes(inventory_id)),
            most_liked_item_id=most_liked.id if most_liked else None,
            most_liked_item_name=most_liked.name if most_liked else None,
            latest_item_id=latest.id if latest else None,
            latest_item_name=latest.name if latest else None,
        )

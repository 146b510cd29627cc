# catalog/services/likes.py
from __future__ import annotations
import logging
from typing import Dict, Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session

from catalog.models.item import Item, ItemLike

logger = logging.getLogger("catalog.likes")
logger.setLevel(logging.INFO)


class ItemNotFound(Exception):
    pass


class LikeService:
    def __init__(self, db: Session):
        self.db = db

    def toggle_like(self, item_id: str, user_id: int) -> int:
        """
        Like the item if the user has not, otherwise remove the like.
        Returns the item's like count after the change.
        """
        if self.db.get(Item, item_id) is None:
            raise ItemNotFound(f"Item {item_id} not found")

        existing = self.db.query(ItemLike).filter(
            ItemLike.item_id == item_id,
            ItemLike.user_id == user_id,
        ).first()

        if existing is None:
            self.db.add(ItemLike(item_id=item_id, user_id=user_id))
        else:
            self.db.delete(existing)
        self.db.commit()

        count = self.count(item_id)
        logger.info(f"Like toggled: item={item_id}, user_id={user_id}, liked={existing is None}, count={count}")
        return count

    def count(self, item_id: str) -> int:
        return self.db.query(func.count(ItemLike.id)).filter(ItemLike.item_id == item_id).scalar() or 0

    def like_counts(self, item_ids: Iterable[str]) -> Dict[str, int]:
        ids = list(item_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(ItemLike.item_id, func.count(ItemLike.id).label("likes"))
            .filter(ItemLike.item_id.in_(ids))
            .group_by(ItemLike.item_id)
            .all()
        )
        counts = {item_id: 0 for item_id in ids}
        counts.update({r.item_id: int(r.likes) for r in rows})
        return counts

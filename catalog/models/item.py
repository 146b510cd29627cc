from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from catalog.core.database import Base
from catalog.models.inventory import new_id, utcnow


class Item(Base):
    __tablename__ = "items"

    id = Column(String(36), primary_key=True, default=new_id)
    inventory_id = Column(String(36), ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    inventory = relationship("Inventory", back_populates="items")
    likes = relationship("ItemLike", back_populates="item", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_items_inventory_created", "inventory_id", "created_at"),
    )


class ItemLike(Base):
    __tablename__ = "item_likes"

    id = Column(String(36), primary_key=True, default=new_id)
    item_id = Column(String(36), ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    item = relationship("Item", back_populates="likes")
    user = relationship("User", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_item_likes_item_user"),
    )

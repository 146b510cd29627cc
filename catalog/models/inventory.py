# catalog/models/inventory.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey,
    UniqueConstraint
)
from sqlalchemy.orm import relationship
from catalog.core.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Inventory(Base):
    __tablename__ = "inventories"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, default="Other")
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_public = Column(Boolean, nullable=False, default=False)

    owner = relationship("User", back_populates="inventories")
    items = relationship("Item", back_populates="inventory", cascade="all, delete-orphan")
    access_grants = relationship("InventoryAccess", back_populates="inventory", cascade="all, delete-orphan")
    discussion_posts = relationship("DiscussionPost", back_populates="inventory", cascade="all, delete-orphan")


class InventoryAccess(Base):
    """Explicit write grant. The owner never has a row here."""
    __tablename__ = "inventory_access"

    id = Column(String(36), primary_key=True, default=new_id)
    inventory_id = Column(String(36), ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    granted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    inventory = relationship("Inventory", back_populates="access_grants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("inventory_id", "user_id", name="uq_inventory_access_inventory_user"),
    )

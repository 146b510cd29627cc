# catalog/models/discussion.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from catalog.core.database import Base
from catalog.models.inventory import new_id, utcnow


class DiscussionPost(Base):
    __tablename__ = "discussion_posts"

    id = Column(String(36), primary_key=True, default=new_id)
    inventory_id = Column(String(36), ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_name = Column(String(50), nullable=False)  # frozen at post time
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    inventory = relationship("Inventory", back_populates="discussion_posts")

    __table_args__ = (
        Index("ix_discussion_posts_inventory_created", "inventory_id", "created_at"),
    )

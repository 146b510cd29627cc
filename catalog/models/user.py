from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from catalog.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)  # display name, may change
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    inventories = relationship("Inventory", back_populates="owner", cascade="all, delete-orphan")
    likes = relationship("ItemLike", back_populates="user", cascade="all, delete-orphan")

# catalog/models/__init__.py
from catalog.core.database import Base  # re-export for convenience

# Import all model modules so their tables attach to Base.metadata
from catalog.models.user import User
from catalog.models.inventory import Inventory, InventoryAccess
from catalog.models.item import Item, ItemLike
from catalog.models.discussion import DiscussionPost

__all__ = [
    "Base",
    "User",
    "Inventory",
    "InventoryAccess",
    "Item",
    "ItemLike",
    "DiscussionPost",
]

# Registers the sqlite FTS5 tables/triggers on Base.metadata
from catalog.models import search_index  # noqa: E402,F401

# catalog/services/permissions.py
"""
Write-permission rules for inventories and their items.

Everything here is pure: the only storage-backed input is the grant lookup,
which the caller passes in and which is consulted only when the ownership
check has already failed.
"""
from __future__ import annotations

from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from catalog.models.inventory import Inventory

GrantLookup = Callable[[str, int], bool]


def is_owner(inventory: Inventory, user_id: Optional[int]) -> bool:
    if user_id is None:
        return False
    return inventory.owner_id == user_id


def can_edit_inventory(inventory: Inventory, user_id: Optional[int], has_grant: GrantLookup) -> bool:
    """Owner, or a user holding an explicit grant on *inventory*."""
    if user_id is None:
        return False
    if is_owner(inventory, user_id):
        return True
    return bool(has_grant(inventory.id, user_id))


def can_edit_items(inventory: Inventory, user_id: Optional[int], has_grant: GrantLookup) -> bool:
    # Same rule as the inventory for now; callers depend on the separate name
    return can_edit_inventory(inventory, user_id, has_grant)


def can_view(inventory: Inventory, user_id: Optional[int], has_grant: GrantLookup) -> bool:
    """Public inventories are readable by anyone; private ones by their editors."""
    if inventory.is_public:
        return True
    return can_edit_inventory(inventory, user_id, has_grant)

# catalog/services/access.py
from __future__ import annotations
import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from catalog.models.user import User
from catalog.models.inventory import Inventory, InventoryAccess, utcnow
from catalog.services import permissions

logger = logging.getLogger("catalog.access")
logger.setLevel(logging.INFO)


class GrantError(Exception):
    """Business-rule rejection of a grant; the message is safe to show."""


class UserNotFound(GrantError):
    pass


class AlreadyGranted(GrantError):
    pass


class AccessGrantStore:
    """Rows of inventory_access. Uniqueness is enforced by uq_inventory_access_inventory_user."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, inventory_id: str, user_id: int) -> bool:
        return self.db.query(InventoryAccess.id).filter(
            InventoryAccess.inventory_id == inventory_id,
            InventoryAccess.user_id == user_id,
        ).first() is not None

    def find(self, inventory_id: str, user_id: int) -> Optional[InventoryAccess]:
        return self.db.query(InventoryAccess).filter(
            InventoryAccess.inventory_id == inventory_id,
            InventoryAccess.user_id == user_id,
        ).first()

    def add(self, inventory_id: str, user_id: int) -> InventoryAccess:
        row = InventoryAccess(inventory_id=inventory_id, user_id=user_id, granted_at=utcnow())
        self.db.add(row)
        self.db.flush()
        return row

    def delete(self, row: InventoryAccess) -> None:
        self.db.delete(row)
        self.db.flush()

    def grantee_ids(self, inventory_id: str) -> List[int]:
        rows = self.db.query(InventoryAccess.user_id).filter(
            InventoryAccess.inventory_id == inventory_id
        ).all()
        return [r.user_id for r in rows]


class AccessService:
    """
    Grant lifecycle and write-permission checks for inventories.

    Callers must verify that the acting user owns the inventory before calling
    grant() or revoke(); this class does not re-check that.
    """

    def __init__(self, db: Session, store: Optional[AccessGrantStore] = None):
        self.db = db
        self.store = store or AccessGrantStore(db)

    def grant(self, inventory_id: str, email: str) -> InventoryAccess:
        """
        Grant write access to the account registered under *email*.

        Raises UserNotFound when no such account exists and AlreadyGranted when
        the user already holds a grant. A concurrent duplicate that slips past
        the check fails on the unique constraint with IntegrityError.
        """
        email = email.strip()
        user = self.db.query(User).filter(func.lower(User.email) == email.lower()).first()
        if not user:
            raise UserNotFound(f"No user found with email '{email}'.")

        if self.store.exists(inventory_id, user.id):
            raise AlreadyGranted(f"User '{email}' already has access.")

        row = self.store.add(inventory_id, user.id)
        self.db.commit()
        logger.info(f"Access granted: inventory={inventory_id}, user_id={user.id}")
        return row

    def revoke(self, inventory_id: str, user_id: int) -> None:
        row = self.store.find(inventory_id, user_id)
        if row is None:
            return
        self.store.delete(row)
        self.db.commit()
        logger.info(f"Access revoked: inventory={inventory_id}, user_id={user_id}")

    def list_grantees(self, inventory_id: str) -> List[User]:
        user_ids = self.store.grantee_ids(inventory_id)
        if not user_ids:
            return []
        return (
            self.db.query(User)
            .filter(User.id.in_(user_ids))
            .order_by(User.username.asc())
            .all()
        )

    def can_edit_inventory(self, inventory_id: str, user_id: Optional[int]) -> bool:
        inventory = self.db.get(Inventory, inventory_id)
        if inventory is None:
            return False
        return permissions.can_edit_inventory(inventory, user_id, self.store.exists)

    def can_edit_items(self, inventory_id: str, user_id: Optional[int]) -> bool:
        inventory = self.db.get(Inventory, inventory_id)
        if inventory is None:
            return False
        return permissions.can_edit_items(inventory, user_id, self.store.exists)

    def can_view(self, inventory: Inventory, user_id: Optional[int]) -> bool:
        return permissions.can_view(inventory, user_id, self.store.exists)

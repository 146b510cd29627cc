# catalog/routes/inventories.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from catalog.services.deps import (
    get_db, get_current_user, get_optional_user, get_inventory_or_404,
    get_access_service, get_like_service, get_statistics_service,
)
from catalog.models.user import User
from catalog.models.inventory import Inventory, utcnow
from catalog.models.item import Item
from catalog.schemas.inventory import InventoryCreate, InventoryUpdate, InventoryOut, InventoryDetailsOut
from catalog.schemas.item import ItemOut
from catalog.schemas.user import UserOut
from catalog.services.access import AccessService
from catalog.services.likes import LikeService
from catalog.services.statistics import StatisticsService
from catalog.services.permissions import is_owner

logger = logging.getLogger("catalog.inventories")
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/inventories", tags=["inventories"])


@router.get("", response_model=List[InventoryOut])
def list_inventories(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Public inventories, plus the caller's own when authenticated."""
    query = db.query(Inventory)
    if user is None:
        query = query.filter(Inventory.is_public.is_(True))
    else:
        query = query.filter(or_(Inventory.is_public.is_(True), Inventory.owner_id == user.id))
    return query.order_by(Inventory.created_at.desc()).all()


@router.post("", response_model=InventoryOut, status_code=201)
def create_inventory(payload: InventoryCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    row = Inventory(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        is_public=payload.is_public,
        owner_id=user.id,
        created_at=utcnow(),
    )
    db.add(row); db.commit(); db.refresh(row)
    logger.info(f"Inventory created: id={row.id}, owner={user.id}")
    return row


@router.get("/{inventory_id}", response_model=InventoryDetailsOut)
def inventory_details(
    inventory: Inventory = Depends(get_inventory_or_404),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    access: AccessService = Depends(get_access_service),
    likes: LikeService = Depends(get_like_service),
    stats: StatisticsService = Depends(get_statistics_service),
):
    if not access.can_view(inventory, user.id):
        raise HTTPException(status_code=403, detail="This inventory is private")

    owner = is_owner(inventory, user.id)

    items = (
        db.query(Item)
        .filter(Item.inventory_id == inventory.id)
        .order_by(Item.created_at.desc())
        .all()
    )
    counts = likes.like_counts(i.id for i in items)

    # Only the owner manages access, so only the owner gets the list
    grantees = access.list_grantees(inventory.id) if owner else []

    return InventoryDetailsOut(
        inventory=InventoryOut.model_validate(inventory),
        is_owner=owner,
        can_edit=access.can_edit_items(inventory.id, user.id),
        items=[
            ItemOut(
                id=i.id,
                inventory_id=i.inventory_id,
                name=i.name,
                description=i.description,
                created_at=i.created_at,
                likes=counts.get(i.id, 0),
            )
            for i in items
        ],
        users_with_access=[UserOut.model_validate(u) for u in grantees],
        stats=stats.summary(inventory.id),
    )


@router.patch("/{inventory_id}", response_model=InventoryOut)
def update_inventory(
    payload: InventoryUpdate,
    inventory: Inventory = Depends(get_inventory_or_404),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    access: AccessService = Depends(get_access_service),
):
    if not access.can_edit_inventory(inventory.id, user.id):
        raise HTTPException(status_code=403, detail="You do not have write access to this inventory")

    if payload.title is not None: inventory.title = payload.title
    if payload.description is not None: inventory.description = payload.description
    if payload.category is not None: inventory.category = payload.category
    if payload.is_public is not None: inventory.is_public = payload.is_public

    db.commit(); db.refresh(inventory)
    return inventory


@router.delete("/{inventory_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory(
    inventory: Inventory = Depends(get_inventory_or_404),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # Grants give write access, never deletion
    if not is_owner(inventory, user.id):
        raise HTTPException(status_code=403, detail="Only the owner can delete this inventory")

    inventory_id = inventory.id
    db.delete(inventory)
    db.commit()
    logger.info(f"Inventory deleted: id={inventory_id}, owner={user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

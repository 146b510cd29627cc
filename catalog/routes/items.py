# catalog/routes/items.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from catalog.services.deps import (
    get_db, get_current_user, get_inventory_or_404, get_item_or_404,
    get_access_service, get_like_service,
)
from catalog.models.user import User
from catalog.models.inventory import Inventory, utcnow
from catalog.models.item import Item
from catalog.schemas.item import ItemCreate, ItemOut, LikeOut
from catalog.services.access import AccessService
from catalog.services.likes import LikeService, ItemNotFound

logger = logging.getLogger("catalog.items")
logger.setLevel(logging.INFO)

router = APIRouter(tags=["items"])


@router.post("/inventories/{inventory_id}/items", response_model=ItemOut, status_code=201)
def create_item(
    payload: ItemCreate,
    inventory: Inventory = Depends(get_inventory_or_404),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    access: AccessService = Depends(get_access_service),
):
    if not access.can_edit_items(inventory.id, user.id):
        raise HTTPException(status_code=403, detail="You do not have write access to this inventory")

    item = Item(
        inventory_id=inventory.id,
        name=payload.name,
        description=payload.description,
        created_at=utcnow(),
    )
    db.add(item); db.commit(); db.refresh(item)
    logger.info(f"Item created: id={item.id}, inventory={inventory.id}, user_id={user.id}")
    # Item.likes is the relationship; a new item has no likes yet
    return ItemOut(
        id=item.id,
        inventory_id=item.inventory_id,
        name=item.name,
        description=item.description,
        created_at=item.created_at,
        likes=0,
    )


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item: Item = Depends(get_item_or_404),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    access: AccessService = Depends(get_access_service),
):
    if not access.can_edit_items(item.inventory_id, user.id):
        raise HTTPException(status_code=403, detail="You do not have write access to this inventory")

    item_id, inventory_id = item.id, item.inventory_id
    db.delete(item)
    db.commit()
    logger.info(f"Item deleted: id={item_id}, inventory={inventory_id}, user_id={user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/items/{item_id}/like", response_model=LikeOut)
def toggle_like(
    item_id: str,
    user: User = Depends(get_current_user),
    likes: LikeService = Depends(get_like_service),
):
    try:
        count = likes.toggle_like(item_id, user.id)
    except ItemNotFound:
        raise HTTPException(404, "Item not found")
    return LikeOut(likes=count)

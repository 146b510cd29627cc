# catalog/routes/access.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from catalog.services.deps import get_current_user, get_inventory_or_404, get_access_service
from catalog.models.user import User
from catalog.models.inventory import Inventory
from catalog.schemas.access import GrantAccessIn, AccessResultOut
from catalog.schemas.user import UserOut
from catalog.services.access import AccessService, AlreadyGranted, UserNotFound
from catalog.services.permissions import is_owner

router = APIRouter(prefix="/inventories/{inventory_id}/access", tags=["access"])


def require_owner(
    inventory: Inventory = Depends(get_inventory_or_404),
    user: User = Depends(get_current_user),
) -> Inventory:
    if not is_owner(inventory, user.id):
        raise HTTPException(status_code=403, detail="Only the owner can manage access")
    return inventory


@router.get("", response_model=List[UserOut])
def list_access(
    inventory: Inventory = Depends(require_owner),
    access: AccessService = Depends(get_access_service),
):
    return access.list_grantees(inventory.id)


@router.post("", response_model=AccessResultOut, status_code=201)
def grant_access(
    payload: GrantAccessIn,
    inventory: Inventory = Depends(require_owner),
    access: AccessService = Depends(get_access_service),
):
    try:
        access.grant(inventory.id, payload.email)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyGranted as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AccessResultOut(success=True, message=f"Access granted to {payload.email.strip()}.")


@router.delete("/{user_id}", response_model=AccessResultOut)
def remove_access(
    user_id: int,
    inventory: Inventory = Depends(require_owner),
    access: AccessService = Depends(get_access_service),
):
    access.revoke(inventory.id, user_id)
    return AccessResultOut(success=True, message="Access removed.")

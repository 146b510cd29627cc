# catalog/routes/discussions.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from starlette.concurrency import run_in_threadpool

from catalog.services.deps import (
    get_current_user, get_inventory_or_404, get_access_service,
    get_discussion_service, get_discussion_channel,
)
from catalog.models.user import User
from catalog.models.inventory import Inventory
from catalog.schemas.discussion import DiscussionPostIn, DiscussionPostOut
from catalog.schemas.websocket import WSMessageReceived
from catalog.services.access import AccessService
from catalog.services.discussion import DiscussionService
from catalog.services.discussion_channel import DiscussionChannel

router = APIRouter(prefix="/inventories/{inventory_id}/posts", tags=["discussion"])


def require_viewer(
    inventory: Inventory = Depends(get_inventory_or_404),
    user: User = Depends(get_current_user),
    access: AccessService = Depends(get_access_service),
) -> Inventory:
    if not access.can_view(inventory, user.id):
        raise HTTPException(status_code=403, detail="This inventory is private")
    return inventory


def message_received_event(post: DiscussionPostOut) -> dict:
    wire = post.model_dump(mode="json")
    return WSMessageReceived(**wire).model_dump(mode="json")


@router.get("", response_model=List[DiscussionPostOut])
def list_posts(
    inventory: Inventory = Depends(require_viewer),
    discussion: DiscussionService = Depends(get_discussion_service),
):
    """Discussion history, oldest first. Live posts arrive over /ws/discussions."""
    return discussion.list_posts(inventory.id)


@router.post("", response_model=DiscussionPostOut, status_code=201)
async def create_post(
    payload: DiscussionPostIn,
    inventory: Inventory = Depends(require_viewer),
    user: User = Depends(get_current_user),
    discussion: DiscussionService = Depends(get_discussion_service),
    channel: DiscussionChannel = Depends(get_discussion_channel),
):
    async with channel.group_lock(inventory.id):
        post = await run_in_threadpool(discussion.post_message, inventory.id, user.id, payload.message)
        if post is None:
            # blank message: nothing to store or broadcast
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        await channel.broadcast(inventory.id, message_received_event(post))
    return post

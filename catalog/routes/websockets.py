# catalog/routes/websockets.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, Depends
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import sessionmaker
from pydantic import ValidationError
from jose import JWTError
import logging
import json
import asyncio
from datetime import datetime, timezone
from typing import Optional

from catalog.core.database import session_scope
from catalog.core.security import user_id_from_token
from catalog.models.user import User
from catalog.models.inventory import Inventory
from catalog.routes.discussions import message_received_event
from catalog.schemas.discussion import DiscussionPostOut
from catalog.schemas.websocket import (
    WSConnected, WSJoin, WSJoined, WSSend, WSHeartbeatPing, WSHeartbeatPong, WSError,
)
from catalog.services.access import AccessService
from catalog.services.deps import get_session_factory, get_discussion_channel
from catalog.services.discussion import DiscussionService
from catalog.services.discussion_channel import DiscussionChannel

logger = logging.getLogger("catalog.websocket.routes")
logger.setLevel(logging.INFO)

router = APIRouter(tags=["websocket"])

PING_INTERVAL_SECONDS = 30.0


def validate_token_and_get_user(token: str, session_factory: sessionmaker) -> tuple[int, str]:
    """
    Validate JWT token and return (user_id, username).
    Raises ValueError if invalid.
    """
    try:
        user_id = user_id_from_token(token)
    except (JWTError, ValueError) as e:
        logger.error(f"Invalid token: {e}")
        raise ValueError(f"Invalid token: {e}")

    with session_scope(session_factory) as db:
        user = db.get(User, user_id)
        if not user:
            raise ValueError(f"User not found: {user_id}")
        return user.id, user.username


@router.websocket("/ws/discussions")
async def discussion_endpoint(
    websocket: WebSocket,
    token: str = Query(..., description="JWT access token"),
    session_factory: sessionmaker = Depends(get_session_factory),
    channel: DiscussionChannel = Depends(get_discussion_channel),
):
    """
    WebSocket endpoint for inventory discussions.

    Authentication:
    - JWT token passed as query parameter
    - Token validated before connection is accepted

    Message Protocol:
    - Sends: {"type": "connected", "connection_id": "...", "user_id": X, "username": "..."}
    - Sends: {"type": "ping", "timestamp": "..."}
    - Sends: {"type": "joined", "inventory_id": "..."}
    - Sends: {"type": "message_received", "id": "...", "user_name": "...", "content": "...", "created_at": "..."}
    - Receives: {"type": "join", "inventory_id": "..."}
    - Receives: {"type": "send", "inventory_id": "...", "message": "..."}
    - Receives: {"type": "pong"}

    No database session is held for the lifetime of the socket; every frame
    opens its own.
    """
    try:
        # Validate token before accepting connection
        user_id, username = validate_token_and_get_user(token, session_factory)
        logger.info(f"WebSocket auth successful for user {user_id} ({username})")

    except ValueError as e:
        logger.warning(f"WebSocket connection rejected: {e}")
        await websocket.close(code=1008, reason=str(e))
        return

    # Accept the WebSocket connection
    await websocket.accept()
    connection_id = None

    try:
        connection_id = await channel.register(websocket, user_id, username)

        # Send welcome message
        await websocket.send_json(
            WSConnected(connection_id=connection_id, user_id=user_id, username=username).model_dump()
        )

        # Main message loop with periodic ping
        loop = asyncio.get_running_loop()
        last_ping_time = loop.time()

        while True:
            # Calculate time until next ping
            timeout = max(0.1, PING_INTERVAL_SECONDS - (loop.time() - last_ping_time))

            try:
                # Wait for message with timeout
                message_text = await asyncio.wait_for(websocket.receive_text(), timeout=timeout)

                # Handle received message
                await handle_client_message(message_text, connection_id, user_id, channel, session_factory)

            except asyncio.TimeoutError:
                # Timeout reached, send ping
                ping = WSHeartbeatPing(timestamp=datetime.now(timezone.utc).isoformat())
                await websocket.send_json(ping.model_dump())
                last_ping_time = loop.time()
                logger.debug(f"Sent ping to connection {connection_id}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected normally for user {user_id}")

    except Exception as e:
        logger.error(f"WebSocket error for user {user_id}: {e}", exc_info=True)

    finally:
        # Group membership lapses with the connection
        if connection_id:
            await channel.unregister(connection_id)


async def handle_client_message(
    message_text: str,
    connection_id: str,
    user_id: int,
    channel: DiscussionChannel,
    session_factory: sessionmaker,
) -> None:
    """
    Handle messages received from WebSocket clients.

    Supported message types:
    - join: subscribe this connection to an inventory's discussion group
    - send: persist a post and broadcast it to the inventory's group
    - pong: Response to ping (updates activity)
    """
    try:
        message = json.loads(message_text)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON from connection {connection_id}: {e}")
        await channel.send_to_connection(
            connection_id, WSError(code="INVALID_MESSAGE", message="Message is not valid JSON").model_dump()
        )
        return

    message_type = message.get("type") if isinstance(message, dict) else None

    try:
        if message_type == "join":
            await _handle_join(WSJoin.model_validate(message), connection_id, user_id, channel, session_factory)

        elif message_type == "send":
            await _handle_send(WSSend.model_validate(message), connection_id, user_id, channel, session_factory)

        elif message_type == "pong":
            WSHeartbeatPong.model_validate(message)
            channel.update_activity(connection_id)
            logger.debug(f"Received pong from connection {connection_id}")

        else:
            logger.warning(f"Unknown message type from connection {connection_id}: {message_type}")
            await channel.send_to_connection(
                connection_id, WSError(code="UNKNOWN_TYPE", message=f"Unknown message type: {message_type}").model_dump()
            )

    except ValidationError as e:
        logger.warning(f"Malformed {message_type} message from connection {connection_id}: {e}")
        await channel.send_to_connection(
            connection_id, WSError(code="INVALID_MESSAGE", message="Message format is invalid").model_dump()
        )


def _check_inventory(session_factory: sessionmaker, inventory_id: str, user_id: int) -> Optional[WSError]:
    """Error frame for an inventory the user cannot reach, None when allowed."""
    with session_scope(session_factory) as db:
        inventory = db.get(Inventory, inventory_id)
        if inventory is None:
            return WSError(code="NOT_FOUND", message="Inventory not found")
        if not AccessService(db).can_view(inventory, user_id):
            return WSError(code="FORBIDDEN", message="This inventory is private")
        return None


def _persist_post(
    session_factory: sessionmaker, inventory_id: str, user_id: int, text: str
) -> Optional[DiscussionPostOut]:
    with session_scope(session_factory) as db:
        # Deleted between the access check and taking the lock
        if db.get(Inventory, inventory_id) is None:
            return None
        return DiscussionService(db).post_message(inventory_id, user_id, text)


async def _handle_join(
    message: WSJoin,
    connection_id: str,
    user_id: int,
    channel: DiscussionChannel,
    session_factory: sessionmaker,
) -> None:
    error = await run_in_threadpool(_check_inventory, session_factory, message.inventory_id, user_id)
    if error is not None:
        await channel.send_to_connection(connection_id, error.model_dump())
        return

    await channel.join(connection_id, message.inventory_id)
    await channel.send_to_connection(connection_id, WSJoined(inventory_id=message.inventory_id).model_dump())


async def _handle_send(
    message: WSSend,
    connection_id: str,
    user_id: int,
    channel: DiscussionChannel,
    session_factory: sessionmaker,
) -> None:
    if not message.message.strip():
        return

    # Only existing, visible inventories ever get a group lock
    error = await run_in_threadpool(_check_inventory, session_factory, message.inventory_id, user_id)
    if error is not None:
        await channel.send_to_connection(connection_id, error.model_dump())
        return

    async with channel.group_lock(message.inventory_id):
        post = await run_in_threadpool(
            _persist_post, session_factory, message.inventory_id, user_id, message.message
        )
        if post is None:
            return
        await channel.broadcast(message.inventory_id, message_received_event(post))

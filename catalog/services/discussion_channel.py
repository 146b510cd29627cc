# catalog/services/discussion_channel.py
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger("catalog.websocket")
logger.setLevel(logging.INFO)


@dataclass
class ConnectionInfo:
    """Information about an active WebSocket connection"""
    connection_id: str
    websocket: WebSocket
    user_id: int
    username: str
    connected_at: datetime
    last_activity: datetime
    inventory_id: Optional[str] = None  # None until the client joins a group


class DiscussionChannel:
    """
    Registry of discussion WebSocket connections grouped by inventory id.

    One instance lives on app.state for the lifetime of the application.
    A connection is Connected after register(), Subscribed once it joins an
    inventory group, and gone after unregister().
    """

    def __init__(self):
        self.connections: Dict[str, ConnectionInfo] = {}
        self.group_index: Dict[str, Set[str]] = {}
        self._group_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}  # holders + waiters per lock
        logger.info("DiscussionChannel initialized")

    async def register(self, websocket: WebSocket, user_id: int, username: str) -> str:
        """Track a newly accepted connection and return its connection id."""
        now = datetime.now(timezone.utc)
        connection_id = uuid.uuid4().hex
        self.connections[connection_id] = ConnectionInfo(
            connection_id=connection_id,
            websocket=websocket,
            user_id=user_id,
            username=username,
            connected_at=now,
            last_activity=now,
        )
        logger.info(
            f"WebSocket connected: connection={connection_id}, user_id={user_id}, "
            f"total_connections={len(self.connections)}"
        )
        return connection_id

    async def join(self, connection_id: str, inventory_id: str) -> bool:
        """
        Subscribe a connection to an inventory's group.
        A connection belongs to one group at a time; joining another moves it.
        """
        conn_info = self.connections.get(connection_id)
        if conn_info is None:
            return False

        if conn_info.inventory_id is not None and conn_info.inventory_id != inventory_id:
            self._leave_group(conn_info)

        conn_info.inventory_id = inventory_id
        self.group_index.setdefault(inventory_id, set()).add(connection_id)
        conn_info.last_activity = datetime.now(timezone.utc)

        logger.info(
            f"Connection {connection_id} joined inventory {inventory_id}, "
            f"group_size={len(self.group_index[inventory_id])}"
        )
        return True

    async def unregister(self, connection_id: str) -> None:
        """Remove a WebSocket connection and clean up indexes"""
        conn_info = self.connections.pop(connection_id, None)
        if conn_info is None:
            return

        self._leave_group(conn_info)

        logger.info(
            f"WebSocket disconnected: connection={connection_id}, user_id={conn_info.user_id}, "
            f"total_connections={len(self.connections)}"
        )

    def _leave_group(self, conn_info: ConnectionInfo) -> None:
        group = self.group_index.get(conn_info.inventory_id)
        if group is not None:
            group.discard(conn_info.connection_id)
            # Clean up empty groups
            if not group:
                del self.group_index[conn_info.inventory_id]
        conn_info.inventory_id = None

    @asynccontextmanager
    async def group_lock(self, inventory_id: str) -> AsyncIterator[None]:
        """
        Hold the inventory's lock while a post is persisted and broadcast, so
        members of a group receive posts in the order they were saved.

        The lock only exists while someone holds or waits for it.
        """
        lock = self._group_locks.get(inventory_id)
        if lock is None:
            lock = asyncio.Lock()
            self._group_locks[inventory_id] = lock
        self._lock_users[inventory_id] = self._lock_users.get(inventory_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[inventory_id] -= 1
            if not self._lock_users[inventory_id]:
                del self._lock_users[inventory_id]
                del self._group_locks[inventory_id]

    async def send_to_connection(self, connection_id: str, message: dict) -> bool:
        """
        Send a message to a single connection.
        Returns True if sent successfully, False if it is gone.
        """
        conn_info = self.connections.get(connection_id)
        if conn_info is None:
            return False

        try:
            await conn_info.websocket.send_json(message)
            conn_info.last_activity = datetime.now(timezone.utc)
            return True
        except Exception as e:
            logger.error(f"Failed to send message to connection {connection_id}: {e}")
            # Connection likely dead, clean up
            await self.unregister(connection_id)
            return False

    async def broadcast(self, inventory_id: str, message: dict) -> int:
        """
        Broadcast a message to every connection subscribed to an inventory.
        Returns count of successful deliveries.
        """
        if inventory_id not in self.group_index:
            logger.info(f"No subscribers for inventory {inventory_id}")
            return 0

        connection_ids = list(self.group_index[inventory_id])  # Copy to avoid modification during iteration
        sent_count = 0

        for connection_id in connection_ids:
            if await self.send_to_connection(connection_id, message):
                sent_count += 1

        logger.info(f"Broadcast to inventory {inventory_id}: sent to {sent_count}/{len(connection_ids)} connections")
        return sent_count

    def update_activity(self, connection_id: str) -> None:
        """Update last activity timestamp for a connection"""
        if connection_id in self.connections:
            self.connections[connection_id].last_activity = datetime.now(timezone.utc)

    def get_connection_count(self) -> int:
        """Get total number of active connections"""
        return len(self.connections)

    def get_group_size(self, inventory_id: str) -> int:
        """Get number of connections subscribed to an inventory"""
        return len(self.group_index.get(inventory_id, set()))

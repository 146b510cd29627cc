# catalog/schemas/websocket.py
from pydantic import BaseModel, Field
from typing import Literal


class WSMessageBase(BaseModel):
    """Base schema for all WebSocket messages"""
    type: str = Field(..., description="Message type discriminator")


class WSConnected(WSMessageBase):
    """
    Server-to-client welcome message.
    Sent immediately after successful WebSocket connection.
    """
    type: Literal["connected"] = "connected"
    connection_id: str = Field(..., description="Server-assigned connection ID")
    user_id: int = Field(..., description="Authenticated user ID")
    username: str = Field(..., description="Current display name")


class WSJoin(WSMessageBase):
    """
    Client-to-server request to subscribe to an inventory's discussion.
    """
    type: Literal["join"]
    inventory_id: str = Field(..., min_length=1, description="Inventory ID, string form")


class WSJoined(WSMessageBase):
    """Server-to-client confirmation of a join."""
    type: Literal["joined"] = "joined"
    inventory_id: str


class WSSend(WSMessageBase):
    """
    Client-to-server chat message for an inventory discussion.
    """
    type: Literal["send"]
    inventory_id: str = Field(..., min_length=1)
    message: str = Field(..., max_length=5000)


class WSMessageReceived(WSMessageBase):
    """
    Server-to-client broadcast of a newly persisted discussion post.
    Sent to every member of the inventory group, the sender included.
    """
    type: Literal["message_received"] = "message_received"
    id: str = Field(..., description="Discussion post ID")
    user_name: str = Field(..., description="Display name captured at post time")
    content: str
    created_at: str = Field(..., description="ISO 8601 timestamp")


class WSHeartbeatPing(WSMessageBase):
    """
    Server-to-client heartbeat ping.
    Client should respond with WSHeartbeatPong.
    """
    type: Literal["ping"] = "ping"
    timestamp: str = Field(..., description="ISO 8601 timestamp")


class WSHeartbeatPong(WSMessageBase):
    """
    Client-to-server heartbeat pong response.
    Updates last_activity timestamp.
    """
    type: Literal["pong"]
    timestamp: str | None = None


class WSError(WSMessageBase):
    """
    Server-to-client error notification.
    Sent when operation fails.
    """
    type: Literal["error"] = "error"
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")


# Example usage documentation
"""
WebSocket Message Protocol Examples:

1. Connection Welcome (Server → Client):
{"type": "connected", "connection_id": "9f2c...", "user_id": 7, "username": "alice"}

2. Join Discussion (Client → Server):
{"type": "join", "inventory_id": "3b1f0c4e-..."}

3. Join Confirmation (Server → Client):
{"type": "joined", "inventory_id": "3b1f0c4e-..."}

4. Send Message (Client → Server):
{"type": "send", "inventory_id": "3b1f0c4e-...", "message": "Is the red one still available?"}

5. Message Received (Server → every member of the group):
{
    "type": "message_received",
    "id": "a7d9...",
    "user_name": "alice",
    "content": "Is the red one still available?",
    "created_at": "2026-02-19T20:45:53.120000+00:00"
}

6. Heartbeat (Server → Client / Client → Server):
{"type": "ping", "timestamp": "..."}  /  {"type": "pong"}

7. Error (Server → Client):
{"type": "error", "code": "NOT_FOUND", "message": "Inventory not found"}
"""

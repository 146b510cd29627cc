# catalog/schemas/discussion.py
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_serializer


class DiscussionPostIn(BaseModel):
    message: str = Field(max_length=5000)


class DiscussionPostOut(BaseModel):
    """
    Wire-safe projection of a discussion post.
    Author id and inventory id are deliberately absent.
    """
    id: str
    user_name: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def _iso_utc(self, value: datetime) -> str:
        # sqlite hands back naive datetimes; everything is stored as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

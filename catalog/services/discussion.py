# catalog/services/discussion.py
from __future__ import annotations
import logging
from typing import Callable, List, Optional
from sqlalchemy.orm import Session

from catalog.models.user import User
from catalog.models.inventory import utcnow
from catalog.models.discussion import DiscussionPost
from catalog.schemas.discussion import DiscussionPostOut

logger = logging.getLogger("catalog.discussion")
logger.setLevel(logging.INFO)

UNKNOWN_AUTHOR = "Unknown"

DisplayNameResolver = Callable[[Session, int], Optional[str]]


def username_resolver(db: Session, user_id: int) -> Optional[str]:
    user = db.get(User, user_id)
    return user.username if user else None


class DiscussionService:
    """
    Persists discussion posts and maps them to the wire projection.

    Holds only the session it was built with; realtime handlers build a new
    service per invocation.
    """

    def __init__(self, db: Session, resolve_display_name: Optional[DisplayNameResolver] = None):
        self.db = db
        self.resolve_display_name = resolve_display_name or username_resolver

    def list_posts(self, inventory_id: str) -> List[DiscussionPostOut]:
        """History for an inventory, oldest first."""
        rows = (
            self.db.query(DiscussionPost)
            .filter(DiscussionPost.inventory_id == inventory_id)
            .order_by(DiscussionPost.created_at.asc(), DiscussionPost.id.asc())
            .all()
        )
        return [DiscussionPostOut.model_validate(p) for p in rows]

    def post_message(self, inventory_id: str, user_id: int, content: str) -> Optional[DiscussionPostOut]:
        """
        Persist a post and return its wire projection.
        Blank content is ignored and returns None.
        """
        if content is None or not content.strip():
            return None

        # A vanished author keeps the post; the foreign key only accepts live users
        author_id = user_id if user_id is not None and self.db.get(User, user_id) is not None else None

        post = DiscussionPost(
            inventory_id=inventory_id,
            user_id=author_id,
            user_name=self._display_name(user_id),
            content=content.strip(),
            created_at=utcnow(),
        )
        self.db.add(post)
        self.db.commit()

        logger.info(f"Discussion post saved: inventory={inventory_id}, post={post.id}, user_id={user_id}")
        return DiscussionPostOut.model_validate(post)

    def _display_name(self, user_id: int) -> str:
        try:
            name = self.resolve_display_name(self.db, user_id)
        except Exception as e:
            logger.warning(f"Display name lookup failed for user {user_id}: {e}")
            return UNKNOWN_AUTHOR
        return name or UNKNOWN_AUTHOR

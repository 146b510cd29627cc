import logging
from typing import Optional
from fastapi import Depends, HTTPException
from starlette.requests import HTTPConnection
from sqlalchemy.orm import Session, sessionmaker
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from catalog.core.security import user_id_from_token
from catalog.models.user import User
from catalog.models.inventory import Inventory
from catalog.models.item import Item
from catalog.services.access import AccessService
from catalog.services.discussion import DiscussionService
from catalog.services.discussion_channel import DiscussionChannel
from catalog.services.likes import LikeService
from catalog.services.search import SearchService, search_index_for
from catalog.services.statistics import StatisticsService

logger = logging.getLogger("catalog.deps")
logger.setLevel(logging.INFO)

oauth2_scheme = HTTPBearer()
optional_oauth2_scheme = HTTPBearer(auto_error=False)


def get_session_factory(conn: HTTPConnection) -> sessionmaker:
    return conn.app.state.session_factory


def get_discussion_channel(conn: HTTPConnection) -> DiscussionChannel:
    return conn.app.state.discussion_channel


def get_db(session_factory: sessionmaker = Depends(get_session_factory)):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def _load_user(token_str: str, db: Session) -> User:
    try:
        user_id = user_id_from_token(token_str)
    except (JWTError, ValueError):
        raise HTTPException(401, "Invalid token")

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


def get_current_user(
    token: HTTPAuthorizationCredentials = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    return _load_user(token.credentials, db)


def get_optional_user(
    token: Optional[HTTPAuthorizationCredentials] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    if token is None:
        return None
    return _load_user(token.credentials, db)


def get_inventory_or_404(inventory_id: str, db: Session = Depends(get_db)) -> Inventory:
    inventory = db.get(Inventory, inventory_id)
    if not inventory:
        raise HTTPException(404, "Inventory not found")
    return inventory


def get_item_or_404(item_id: str, db: Session = Depends(get_db)) -> Item:
    item = db.get(Item, item_id)
    if not item:
        raise HTTPException(404, "Item not found")
    return item


def get_access_service(db: Session = Depends(get_db)) -> AccessService:
    return AccessService(db)


def get_discussion_service(db: Session = Depends(get_db)) -> DiscussionService:
    return DiscussionService(db)


def get_like_service(db: Session = Depends(get_db)) -> LikeService:
    return LikeService(db)


def get_statistics_service(db: Session = Depends(get_db)) -> StatisticsService:
    return StatisticsService(db)


def get_search_service(db: Session = Depends(get_db)) -> SearchService:
    return SearchService(search_index_for(db))

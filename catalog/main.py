import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from catalog.core.config import CORS_ORIGINS, AUTO_CREATE_SCHEMA
from catalog.core.database import SessionLocal
from catalog.models import Base
from catalog.routes import inventories, items, access, discussions, search, websockets
from catalog.services.discussion_channel import DiscussionChannel

logger = logging.getLogger("catalog.main")
logger.setLevel(logging.INFO)


def create_app(session_factory: Optional[sessionmaker] = None, create_schema: bool = AUTO_CREATE_SCHEMA) -> FastAPI:
    """
    Build the application with its collaborators attached to app.state:
    the session factory every request and socket frame draws from, and the
    discussion channel shared by all sockets.
    """
    app = FastAPI(title="Inventory Catalog")

    app.state.session_factory = session_factory or SessionLocal
    app.state.discussion_channel = DiscussionChannel()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(inventories.router)
    app.include_router(items.router)
    app.include_router(access.router)
    app.include_router(discussions.router)
    app.include_router(search.router)

    # WebSocket Routers
    app.include_router(websockets.router)

    @app.on_event("startup")
    def on_startup():
        if create_schema:
            # Local sqlite setups; PostgreSQL schema comes from alembic
            bind = app.state.session_factory.kw["bind"]
            Base.metadata.create_all(bind=bind)
            logger.info(f"Schema ensured on {bind.url.render_as_string(hide_password=True)}")

    return app


app = create_app()

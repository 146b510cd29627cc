# catalog/core/config.py
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./catalog.db")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if o.strip()
]

SEARCH_PAGE_SIZE = int(os.getenv("SEARCH_PAGE_SIZE", "10"))

# Schema is managed by alembic on PostgreSQL; local sqlite databases are created on startup
AUTO_CREATE_SCHEMA = os.getenv(
    "AUTO_CREATE_SCHEMA", "true" if DATABASE_URL.startswith("sqlite") else "false"
).lower() in ("1", "true", "yes")

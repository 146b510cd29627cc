# catalog/models/search_index.py
"""
SQLite full-text index tables.

PostgreSQL ranks straight off the source columns with to_tsvector (see the
GIN indexes in the alembic revision). SQLite has no such function, so each
searchable table gets an FTS5 shadow table maintained by triggers. The
statements only run when metadata is created on a sqlite engine.
"""
from sqlalchemy import DDL, event

from catalog.core.database import Base

_SQLITE_FTS_DDL = [
    # ----- Inventories: title + description -----
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS inventories_fts USING fts5(
        id UNINDEXED, title, description, tokenize = 'porter unicode61'
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS inventories_fts_ai AFTER INSERT ON inventories BEGIN
        INSERT INTO inventories_fts (id, title, description)
        VALUES (new.id, new.title, COALESCE(new.description, ''));
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS inventories_fts_ad AFTER DELETE ON inventories BEGIN
        DELETE FROM inventories_fts WHERE id = old.id;
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS inventories_fts_au AFTER UPDATE OF title, description ON inventories BEGIN
        DELETE FROM inventories_fts WHERE id = old.id;
        INSERT INTO inventories_fts (id, title, description)
        VALUES (new.id, new.title, COALESCE(new.description, ''));
    END
    """,
    # ----- Items: name + description -----
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS items_fts USING fts5(
        id UNINDEXED, inventory_id UNINDEXED, name, description, tokenize = 'porter unicode61'
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS items_fts_ai AFTER INSERT ON items BEGIN
        INSERT INTO items_fts (id, inventory_id, name, description)
        VALUES (new.id, new.inventory_id, new.name, COALESCE(new.description, ''));
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS items_fts_ad AFTER DELETE ON items BEGIN
        DELETE FROM items_fts WHERE id = old.id;
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS items_fts_au AFTER UPDATE OF name, description ON items BEGIN
        DELETE FROM items_fts WHERE id = old.id;
        INSERT INTO items_fts (id, inventory_id, name, description)
        VALUES (new.id, new.inventory_id, new.name, COALESCE(new.description, ''));
    END
    """,
]

for _statement in _SQLITE_FTS_DDL:
    event.listen(Base.metadata, "after_create", DDL(_statement).execute_if(dialect="sqlite"))

# catalog/services/search.py
from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.orm import Session

from catalog.schemas.search import SearchPage, SearchResult

logger = logging.getLogger("catalog.search")
logger.setLevel(logging.INFO)

SNIPPET_LENGTH = 200


@dataclass
class SearchHit:
    type: str
    id: str
    inventory_id: Optional[str]
    title: str
    snippet: str
    rank: float


class SearchIndex(Protocol):
    def ranked_matches(self, query: str) -> List[SearchHit]:
        """Every public inventory, and item of a public inventory, matching *query* with a relevance score."""
        ...


def _rows_to_hits(rows) -> List[SearchHit]:
    return [
        SearchHit(
            type=r["type"],
            id=str(r["id"]),
            inventory_id=str(r["inventory_id"]) if r["inventory_id"] is not None else None,
            title=r["title"] or "",
            snippet=r["snippet"] or "",
            rank=float(r["score"] or 0),
        )
        for r in rows
    ]


class PostgresSearchIndex:
    """
    Ranks with PostgreSQL's native full-text search.
    plainto_tsquery accepts free text, so user input never hits tsquery syntax.
    """

    _INVENTORY_SQL = """
    SELECT
      inv.id                    AS id,
      NULL                      AS inventory_id,
      'Inventory'               AS type,
      inv.title                 AS title,
      LEFT(inv.description, :snippet_len) AS snippet,
      ts_rank(
        to_tsvector('english', COALESCE(inv.title, '') || ' ' || COALESCE(inv.description, '')),
        plainto_tsquery('english', :q)
      )                         AS score
    FROM inventories inv
    WHERE inv.is_public
      AND to_tsvector('english', COALESCE(inv.title, '') || ' ' || COALESCE(inv.description, ''))
          @@ plainto_tsquery('english', :q)
    """

    _ITEM_SQL = """
    SELECT
      it.id                     AS id,
      it.inventory_id           AS inventory_id,
      'Item'                    AS type,
      it.name                   AS title,
      LEFT(it.description, :snippet_len) AS snippet,
      ts_rank(
        to_tsvector('english', COALESCE(it.name, '') || ' ' || COALESCE(it.description, '')),
        plainto_tsquery('english', :q)
      )                         AS score
    FROM items it
    JOIN inventories inv ON inv.id = it.inventory_id
    WHERE inv.is_public
      AND to_tsvector('english', COALESCE(it.name, '') || ' ' || COALESCE(it.description, ''))
          @@ plainto_tsquery('english', :q)
    """

    def __init__(self, db: Session):
        self.db = db

    def ranked_matches(self, query: str) -> List[SearchHit]:
        params = {"q": query, "snippet_len": SNIPPET_LENGTH}
        inventories = self.db.execute(text(self._INVENTORY_SQL), params).mappings().all()
        items = self.db.execute(text(self._ITEM_SQL), params).mappings().all()
        return _rows_to_hits(inventories) + _rows_to_hits(items)


class SqliteSearchIndex:
    """
    Ranks with SQLite FTS5 over the inventories_fts / items_fts tables
    (porter stemming, bm25 scoring; see catalog.models.search_index).
    """

    _INVENTORY_SQL = """
    SELECT
      inventories.id            AS id,
      NULL                      AS inventory_id,
      'Inventory'               AS type,
      inventories.title         AS title,
      substr(COALESCE(inventories.description, ''), 1, :snippet_len) AS snippet,
      m.score                   AS score
    FROM (
      SELECT id AS fts_id, -bm25(inventories_fts) AS score
      FROM inventories_fts
      WHERE inventories_fts MATCH :q
    ) AS m
    JOIN inventories ON inventories.id = m.fts_id
    WHERE inventories.is_public = 1
    """

    _ITEM_SQL = """
    SELECT
      items.id                  AS id,
      items.inventory_id        AS inventory_id,
      'Item'                    AS type,
      items.name                AS title,
      substr(COALESCE(items.description, ''), 1, :snippet_len) AS snippet,
      m.score                   AS score
    FROM (
      SELECT id AS fts_id, -bm25(items_fts) AS score
      FROM items_fts
      WHERE items_fts MATCH :q
    ) AS m
    JOIN items ON items.id = m.fts_id
    JOIN inventories ON inventories.id = items.inventory_id
    WHERE inventories.is_public = 1
    """

    _WORD = re.compile(r"\w+", re.UNICODE)

    def __init__(self, db: Session):
        self.db = db

    @classmethod
    def to_match_expression(cls, query: str) -> str:
        """
        Reduce free text to quoted FTS5 terms joined by implicit AND,
        which mirrors plainto_tsquery and keeps operators out of user input.
        """
        return " ".join(f'"{word}"' for word in cls._WORD.findall(query))

    def ranked_matches(self, query: str) -> List[SearchHit]:
        expression = self.to_match_expression(query)
        if not expression:
            return []
        params = {"q": expression, "snippet_len": SNIPPET_LENGTH}
        inventories = self.db.execute(text(self._INVENTORY_SQL), params).mappings().all()
        items = self.db.execute(text(self._ITEM_SQL), params).mappings().all()
        return _rows_to_hits(inventories) + _rows_to_hits(items)


def search_index_for(db: Session) -> SearchIndex:
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return PostgresSearchIndex(db)
    if dialect == "sqlite":
        return SqliteSearchIndex(db)
    raise RuntimeError(f"No full-text search support for dialect '{dialect}'")


class SearchService:
    def __init__(self, index: SearchIndex):
        self.index = index

    def search(self, query: Optional[str], page: int = 1, page_size: int = 10) -> SearchPage:
        """
        Ranked search across inventories and items, merged and paginated.

        Pages are 1-based and clamped to [1, total_pages]; total_pages is at
        least 1 even with no results. A blank query returns an empty page
        without touching the index.
        """
        query = (query or "").strip()
        if not query:
            return SearchPage(query="")

        page_size = max(1, page_size)
        hits = sorted(self.index.ranked_matches(query), key=lambda h: h.rank, reverse=True)

        total_count = len(hits)
        total_pages = max(1, math.ceil(total_count / page_size))
        page = min(max(1, page), total_pages)

        start = (page - 1) * page_size
        results = [
            SearchResult(
                type=h.type,
                id=h.id,
                inventory_id=h.inventory_id,
                title=h.title,
                snippet=h.snippet,
                rank=h.rank,
            )
            for h in hits[start:start + page_size]
        ]

        logger.info(f"Search '{query}': total={total_count}, page={page}/{total_pages}")
        return SearchPage(
            query=query,
            results=results,
            page=page,
            total_pages=total_pages,
            total_count=total_count,
        )

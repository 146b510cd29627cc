"""
Tests for ranked search: pagination rules against a stub index, and the
SQLite FTS5 index end to end.
"""
import pytest
from sqlalchemy import text

from catalog.services.search import SearchHit, SearchService, SqliteSearchIndex, search_index_for

from factories import auth_headers, make_inventory, make_item

pytestmark = pytest.mark.search


class StubIndex:
    def __init__(self, hits):
        self.hits = hits
        self.queries = []

    def ranked_matches(self, query):
        self.queries.append(query)
        return list(self.hits)


def _hits(n):
    return [
        SearchHit(type="Item", id=f"item-{i}", inventory_id="inv", title=f"Item {i}", snippet="", rank=float(i))
        for i in range(n)
    ]


class TestPagination:

    def test_out_of_range_page_is_clamped(self):
        page = SearchService(StubIndex(_hits(25))).search("anything", page=10, page_size=10)

        assert page.total_count == 25
        assert page.total_pages == 3
        assert page.page == 3
        assert len(page.results) == 5

    def test_page_below_one_is_clamped(self):
        page = SearchService(StubIndex(_hits(25))).search("anything", page=-4, page_size=10)
        assert page.page == 1
        assert len(page.results) == 10

    def test_results_sorted_by_rank(self):
        page = SearchService(StubIndex(_hits(25))).search("anything", page=1, page_size=10)
        ranks = [r.rank for r in page.results]
        assert ranks == sorted(ranks, reverse=True)
        assert ranks[0] == 24.0

    def test_no_hits_still_has_one_page(self):
        page = SearchService(StubIndex([])).search("nothing", page=3, page_size=10)
        assert (page.page, page.total_pages, page.total_count) == (1, 1, 0)
        assert page.results == []

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_skips_index(self, query):
        index = StubIndex(_hits(3))
        page = SearchService(index).search(query, page=2, page_size=10)

        assert index.queries == []
        assert page.results == []
        assert (page.page, page.total_pages, page.total_count) == (1, 1, 0)


class TestSqliteIndex:

    def _search(self, db, query, page=1, page_size=10):
        return SearchService(search_index_for(db)).search(query, page=page, page_size=page_size)

    def test_red_shoes(self, db, owner):
        shoes = make_inventory(db, owner, title="Red Running Shoes")
        hats = make_inventory(db, owner, title="Headwear")
        make_item(db, hats, name="Blue Hat")

        page = self._search(db, "red shoes")

        assert page.total_count == 1
        assert page.results[0].type == "Inventory"
        assert page.results[0].id == shoes.id
        assert page.results[0].inventory_id is None

    def test_item_hit_carries_inventory(self, db, inventory, item):
        page = self._search(db, "canon")

        assert [(r.type, r.id, r.inventory_id) for r in page.results] == [("Item", item.id, inventory.id)]
        assert page.results[0].title == "Canon AE-1"
        assert page.results[0].snippet == "35mm SLR"

    def test_inventories_and_items_are_merged(self, db, owner):
        cameras = make_inventory(db, owner, title="Camera bag", description="Everything camera related")
        make_item(db, cameras, name="Camera strap")

        page = self._search(db, "camera")

        assert page.total_count == 2
        assert {r.type for r in page.results} == {"Inventory", "Item"}
        ranks = [r.rank for r in page.results]
        assert ranks == sorted(ranks, reverse=True)

    def test_stemming(self, db, inventory):
        # "Vintage Cameras" matches the singular form
        page = self._search(db, "camera")
        assert [r.id for r in page.results] == [inventory.id]

    def test_private_inventories_are_excluded(self, db, private_inventory):
        make_item(db, private_inventory, name="Private diary")

        assert self._search(db, "private").total_count == 0

    def test_index_follows_updates(self, db, inventory, item):
        inventory.title = "Lenses"
        item.name = "Helios 44"
        db.commit()

        assert self._search(db, "vintage").total_count == 0
        assert self._search(db, "canon").total_count == 0
        assert self._search(db, "lenses").results[0].id == inventory.id
        assert self._search(db, "helios").results[0].id == item.id

    def test_index_follows_deletes(self, db, inventory, item):
        db.delete(item)
        db.commit()
        assert self._search(db, "canon").total_count == 0

        db.delete(inventory)
        db.commit()
        assert self._search(db, "vintage").total_count == 0
        assert db.execute(text("SELECT count(*) FROM items_fts")).scalar() == 0
        assert db.execute(text("SELECT count(*) FROM inventories_fts")).scalar() == 0

    def test_operators_in_user_input_are_literal(self, db, inventory):
        assert SqliteSearchIndex.to_match_expression('vintage OR "cameras" -x*') == \
            '"vintage" "OR" "cameras" "x"'
        # Punctuation alone leaves nothing to match
        assert self._search(db, '"*:()').total_count == 0

    def test_snippet_is_truncated(self, db, owner):
        make_inventory(db, owner, title="Long read", description="word " * 100)
        snippet = self._search(db, "long").results[0].snippet
        assert len(snippet) == 200


class TestSearchEndpoint:

    def test_search_is_public(self, client, inventory, item):
        response = client.get("/search", params={"q": "vintage cameras"})

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "vintage cameras"
        assert body["total_count"] == 1
        assert body["results"][0]["type"] == "Inventory"
        assert body["results"][0]["title"] == "Vintage Cameras"

    def test_blank_query(self, client, owner):
        body = client.get("/search", params={"q": "  "}, headers=auth_headers(owner)).json()
        assert body == {"query": "", "results": [], "page": 1, "total_pages": 1, "total_count": 0}

    def test_page_parameter_is_clamped(self, client, db, owner):
        shelf = make_inventory(db, owner, title="Records")
        for n in range(12):
            make_item(db, shelf, name=f"Jazz record {n}")

        body = client.get("/search", params={"q": "jazz", "page": 7}).json()
        assert body["total_count"] == 12
        assert body["total_pages"] == 2
        assert body["page"] == 2
        assert len(body["results"]) == 2

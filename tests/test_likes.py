"""
Tests for the like toggle.
"""
import pytest

from catalog.models import ItemLike
from catalog.services.likes import LikeService, ItemNotFound

from factories import auth_headers, make_item


class TestToggleLike:

    def test_toggle_twice_restores_state(self, db, item, stranger):
        likes = LikeService(db)

        assert likes.toggle_like(item.id, stranger.id) == 1
        assert likes.toggle_like(item.id, stranger.id) == 0
        assert db.query(ItemLike).count() == 0

    def test_each_user_counts_once(self, db, item, owner, editor, stranger):
        likes = LikeService(db)
        likes.toggle_like(item.id, owner.id)
        likes.toggle_like(item.id, editor.id)

        assert likes.toggle_like(item.id, stranger.id) == 3
        assert likes.toggle_like(item.id, editor.id) == 2
        assert {like.user_id for like in db.query(ItemLike).all()} == {owner.id, stranger.id}

    def test_missing_item(self, db, stranger):
        with pytest.raises(ItemNotFound):
            LikeService(db).toggle_like("no-such-item", stranger.id)

    def test_like_counts_include_unliked_items(self, db, inventory, item, stranger):
        other = make_item(db, inventory, name="Nikon FM2")
        LikeService(db).toggle_like(item.id, stranger.id)

        assert LikeService(db).like_counts([item.id, other.id]) == {item.id: 1, other.id: 0}
        assert LikeService(db).like_counts([]) == {}


class TestLikeEndpoint:

    def test_like_and_unlike(self, client, item, stranger):
        url = f"/items/{item.id}/like"

        response = client.post(url, headers=auth_headers(stranger))
        assert response.status_code == 200
        assert response.json() == {"likes": 1}

        response = client.post(url, headers=auth_headers(stranger))
        assert response.json() == {"likes": 0}

    def test_like_missing_item(self, client, stranger):
        response = client.post("/items/nope/like", headers=auth_headers(stranger))
        assert response.status_code == 404

    def test_like_requires_authentication(self, client, item):
        response = client.post(f"/items/{item.id}/like")
        assert response.status_code in (401, 403)

"""
Tests for access grants: the service and the owner-only HTTP endpoints.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from catalog.models import InventoryAccess
from catalog.services.access import AccessService, AccessGrantStore, AlreadyGranted, UserNotFound

from factories import auth_headers, make_inventory, make_user

pytestmark = pytest.mark.permissions


def _grant_rows(db, inventory):
    db.expire_all()
    return db.query(InventoryAccess).filter(InventoryAccess.inventory_id == inventory.id).all()


class TestAccessService:

    def test_grant_by_email(self, db, inventory, editor):
        service = AccessService(db)
        service.grant(inventory.id, editor.email)

        assert service.can_edit_items(inventory.id, editor.id)
        assert service.can_edit_inventory(inventory.id, editor.id)
        assert [r.user_id for r in _grant_rows(db, inventory)] == [editor.id]

    def test_grant_email_is_case_insensitive(self, db, inventory, editor):
        AccessService(db).grant(inventory.id, f"  {editor.email.upper()} ")
        assert len(_grant_rows(db, inventory)) == 1

    def test_grant_unknown_email(self, db, inventory):
        with pytest.raises(UserNotFound):
            AccessService(db).grant(inventory.id, "nobody@example.com")
        assert _grant_rows(db, inventory) == []

    def test_duplicate_grant_is_rejected(self, db, inventory, editor):
        service = AccessService(db)
        service.grant(inventory.id, editor.email)

        with pytest.raises(AlreadyGranted) as exc:
            service.grant(inventory.id, editor.email)

        assert editor.email in str(exc.value)
        assert len(_grant_rows(db, inventory)) == 1

    def test_unique_constraint_backs_up_the_check(self, db, inventory, editor):
        store = AccessGrantStore(db)
        store.add(inventory.id, editor.id)
        db.commit()

        with pytest.raises(IntegrityError):
            store.add(inventory.id, editor.id)
        db.rollback()
        assert len(_grant_rows(db, inventory)) == 1

    def test_revoke(self, db, inventory, editor):
        service = AccessService(db)
        service.grant(inventory.id, editor.email)
        service.revoke(inventory.id, editor.id)

        assert _grant_rows(db, inventory) == []
        assert not service.can_edit_items(inventory.id, editor.id)

    def test_revoke_missing_grant_is_noop(self, db, inventory, editor, stranger):
        service = AccessService(db)
        service.grant(inventory.id, editor.email)

        service.revoke(inventory.id, stranger.id)

        assert [r.user_id for r in _grant_rows(db, inventory)] == [editor.id]

    def test_list_grantees_excludes_owner(self, db, owner, inventory, editor, stranger):
        service = AccessService(db)
        assert service.list_grantees(inventory.id) == []

        service.grant(inventory.id, stranger.email)
        service.grant(inventory.id, editor.email)

        grantees = service.list_grantees(inventory.id)
        assert [u.username for u in grantees] == ["editor", "stranger"]
        assert owner.id not in {u.id for u in grantees}

    def test_owner_always_allowed_without_grant(self, db, owner, inventory):
        assert AccessService(db).can_edit_items(inventory.id, owner.id)
        assert _grant_rows(db, inventory) == []

    def test_missing_inventory_denies(self, db, owner):
        assert not AccessService(db).can_edit_items("does-not-exist", owner.id)

    def test_grant_is_per_inventory(self, db, owner, inventory, editor):
        other = make_inventory(db, owner, title="Other")
        AccessService(db).grant(inventory.id, editor.email)

        assert not AccessService(db).can_edit_items(other.id, editor.id)


class TestAccessEndpoints:

    def test_owner_grants_access(self, client, owner, inventory, editor):
        response = client.post(
            f"/inventories/{inventory.id}/access",
            json={"email": editor.email},
            headers=auth_headers(owner),
        )
        assert response.status_code == 201
        assert response.json() == {"success": True, "message": f"Access granted to {editor.email}."}

        listed = client.get(f"/inventories/{inventory.id}/access", headers=auth_headers(owner))
        assert [u["id"] for u in listed.json()] == [editor.id]

    def test_duplicate_grant_returns_conflict(self, client, owner, inventory, editor):
        url = f"/inventories/{inventory.id}/access"
        client.post(url, json={"email": editor.email}, headers=auth_headers(owner))

        response = client.post(url, json={"email": editor.email}, headers=auth_headers(owner))
        assert response.status_code == 409
        assert "already has access" in response.json()["detail"]

    def test_unknown_email_returns_not_found(self, client, owner, inventory):
        response = client.post(
            f"/inventories/{inventory.id}/access",
            json={"email": "ghost@example.com"},
            headers=auth_headers(owner),
        )
        assert response.status_code == 404
        assert "ghost@example.com" in response.json()["detail"]

    def test_non_owner_cannot_manage_access(self, client, db, inventory, editor, stranger):
        AccessService(db).grant(inventory.id, editor.email)

        # Even a user with write access may not hand it out
        response = client.post(
            f"/inventories/{inventory.id}/access",
            json={"email": stranger.email},
            headers=auth_headers(editor),
        )
        assert response.status_code == 403

        response = client.delete(f"/inventories/{inventory.id}/access/{editor.id}", headers=auth_headers(stranger))
        assert response.status_code == 403

        response = client.get(f"/inventories/{inventory.id}/access", headers=auth_headers(editor))
        assert response.status_code == 403

    def test_remove_access(self, client, db, owner, inventory, editor):
        AccessService(db).grant(inventory.id, editor.email)

        response = client.delete(f"/inventories/{inventory.id}/access/{editor.id}", headers=auth_headers(owner))
        assert response.status_code == 200
        assert _grant_rows(db, inventory) == []

        # Second removal is a no-op, not an error
        response = client.delete(f"/inventories/{inventory.id}/access/{editor.id}", headers=auth_headers(owner))
        assert response.status_code == 200

    def test_access_on_missing_inventory(self, client, owner):
        response = client.post("/inventories/nope/access", json={"email": "x@example.com"}, headers=auth_headers(owner))
        assert response.status_code == 404

    def test_requires_authentication(self, client, inventory):
        response = client.get(f"/inventories/{inventory.id}/access")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client, inventory):
        response = client.get(
            f"/inventories/{inventory.id}/access",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db, inventory):
        ghost = make_user(db, "ghost")
        headers = auth_headers(ghost)
        db.delete(ghost)
        db.commit()

        response = client.get(f"/inventories/{inventory.id}/access", headers=headers)
        assert response.status_code == 404

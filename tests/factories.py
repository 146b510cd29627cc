"""Small builders shared by the test modules."""
from catalog.core.security import create_jwt_token
from catalog.models import User, Inventory, Item


def make_user(db, username, email=None):
    user = User(username=username, email=email or f"{username}@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_inventory(db, owner, title="Test Inventory", description="", is_public=True, category="Other"):
    inventory = Inventory(
        title=title,
        description=description,
        category=category,
        owner_id=owner.id,
        is_public=is_public,
    )
    db.add(inventory)
    db.commit()
    db.refresh(inventory)
    return inventory


def make_item(db, inventory, name="Test Item", description=""):
    item = Item(inventory_id=inventory.id, name=name, description=description)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def auth_headers(user):
    return {"Authorization": f"Bearer {create_jwt_token({'sub': str(user.id)})}"}


def ws_token(user):
    return create_jwt_token({"sub": str(user.id)})


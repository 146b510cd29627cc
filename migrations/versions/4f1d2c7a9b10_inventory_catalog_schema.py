"""Inventory catalog schema

Revision ID: 4f1d2c7a9b10
Revises:
Create Date: 2026-02-18 17:08:27

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4f1d2c7a9b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ----- Users -----
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # ----- Inventories -----
    op.create_table(
        "inventories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(length=100), nullable=False, server_default="Other"),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_inventories_owner_id", "inventories", ["owner_id"])

    # ----- Items -----
    op.create_table(
        "items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("inventory_id", sa.String(length=36), sa.ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_items_inventory_created", "items", ["inventory_id", "created_at"])

    # ----- Access grants -----
    op.create_table(
        "inventory_access",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("inventory_id", sa.String(length=36), sa.ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("inventory_id", "user_id", name="uq_inventory_access_inventory_user"),
    )
    op.create_index("ix_inventory_access_user_id", "inventory_access", ["user_id"])

    # ----- Discussion posts -----
    op.create_table(
        "discussion_posts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("inventory_id", sa.String(length=36), sa.ForeignKey("inventories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("user_name", sa.String(length=50), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_discussion_posts_inventory_created", "discussion_posts", ["inventory_id", "created_at"])

    # ----- Item likes -----
    op.create_table(
        "item_likes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("item_id", sa.String(length=36), sa.ForeignKey("items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("item_id", "user_id", name="uq_item_likes_item_user"),
    )
    op.create_index("ix_item_likes_user_id", "item_likes", ["user_id"])

    # ----- Full-text search (expressions must match catalog/services/search.py) -----
    op.execute("""
        CREATE INDEX ix_inventories_fts ON inventories
        USING GIN (to_tsvector('english', COALESCE(title, '') || ' ' || COALESCE(description, '')))
    """)
    op.execute("""
        CREATE INDEX ix_items_fts ON items
        USING GIN (to_tsvector('english', COALESCE(name, '') || ' ' || COALESCE(description, '')))
    """)


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_items_fts")
    op.execute("DROP INDEX IF EXISTS ix_inventories_fts")
    op.drop_index("ix_item_likes_user_id", table_name="item_likes")
    op.drop_table("item_likes")
    op.drop_index("ix_discussion_posts_inventory_created", table_name="discussion_posts")
    op.drop_table("discussion_posts")
    op.drop_index("ix_inventory_access_user_id", table_name="inventory_access")
    op.drop_table("inventory_access")
    op.drop_index("ix_items_inventory_created", table_name="items")
    op.drop_table("items")
    op.drop_index("ix_inventories_owner_id", table_name="inventories")
    op.drop_table("inventories")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

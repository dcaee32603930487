"""Create Scriblink tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates users, folders (with child and item link tables), notes,
       tags (with item links) and summaries.
How:   Ids are 36-char strings generated by the application (uuid4), so the
       same schema runs on PostgreSQL and SQLite.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "folders",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )
    op.create_index("ix_folders_owner", "folders", ["owner"])

    # Parent of a folder = the row listing it as child_id (reverse lookup)
    op.create_table(
        "folder_children",
        sa.Column(
            "parent_id",
            sa.String(36),
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("child_id", sa.String(36), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("idx_folder_children_child", "folder_children", ["child_id"])

    op.create_table(
        "folder_items",
        sa.Column(
            "folder_id",
            sa.String(36),
            sa.ForeignKey("folders.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("item_id", sa.String(36), primary_key=True),
    )
    op.create_index("idx_folder_items_item", "folder_items", ["item_id"])

    op.create_table(
        "notes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False, server_default=sa.text("'Untitled'")),
        sa.Column("content", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("owner", sa.String(36), nullable=False),
        sa.Column(
            "date_created",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "last_modified",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )
    op.create_index("idx_notes_owner", "notes", ["owner"])

    op.create_table(
        "tags",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner", sa.String(36), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.UniqueConstraint("owner", "label", name="uq_tags_owner_label"),
    )

    op.create_table(
        "tag_items",
        sa.Column(
            "tag_id",
            sa.String(36),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("item_id", sa.String(36), primary_key=True),
    )
    op.create_index("idx_tag_items_item", "tag_items", ["item_id"])

    # One summary per item: the item id is the key
    op.create_table(
        "summaries",
        sa.Column("item_id", sa.String(36), primary_key=True),
        sa.Column("summary", sa.Text(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("summaries")
    op.drop_index("idx_tag_items_item", table_name="tag_items")
    op.drop_table("tag_items")
    op.drop_table("tags")
    op.drop_index("idx_notes_owner", table_name="notes")
    op.drop_table("notes")
    op.drop_index("idx_folder_items_item", table_name="folder_items")
    op.drop_table("folder_items")
    op.drop_index("idx_folder_children_child", table_name="folder_children")
    op.drop_table("folder_children")
    op.drop_index("ix_folders_owner", table_name="folders")
    op.drop_table("folders")
    op.drop_table("users")

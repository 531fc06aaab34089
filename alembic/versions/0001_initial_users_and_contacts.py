# alembic/versions/0001_initial_users_and_contacts.py
"""Initial users and contacts tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create users and contacts tables.

    Role, status and source are stored as VARCHAR rather than native ENUM
    for portability across PostgreSQL and SQLite. The columns hold the
    lower-case enum values, which the server defaults match.

    contacts.assigned_to_id has no foreign key: the assignee link is
    informational and may point at a user that no longer exists.
    """
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=5), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "contacts",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("job_title", sa.String(length=255), nullable=True),
        sa.Column(
            "status", sa.String(length=11), nullable=False, server_default="lead"
        ),
        sa.Column(
            "source", sa.String(length=12), nullable=False, server_default="other"
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_to_id", sa.String(length=32), nullable=True),
        sa.Column("created_by", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["created_by"], ["users.id"], name="fk_contacts_created_by_users"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_contacts_created_by"), "contacts", ["created_by"], unique=False
    )
    op.create_index(
        "ix_contacts_created_by_created_at",
        "contacts",
        ["created_by", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    """Drop contacts and users tables."""
    op.drop_index("ix_contacts_created_by_created_at", table_name="contacts")
    op.drop_index(op.f("ix_contacts_created_by"), table_name="contacts")
    op.drop_table("contacts")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

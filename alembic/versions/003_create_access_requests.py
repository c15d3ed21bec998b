"""create access_requests table, one PENDING per (requester, class)

Revision ID: 003
Revises: 002
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "access_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("class_id", sa.String(36), sa.ForeignKey("classes.id"), nullable=False, index=True),
        sa.Column("requester_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("requested_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("decided_at", sa.DateTime(), nullable=True),
        sa.Column("decided_by_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
    )
    # Partial unique index: the storage-level guard against racing submits
    op.create_index(
        "ix_access_requests_requester_class_pending",
        "access_requests",
        ["requester_id", "class_id"],
        unique=True,
        postgresql_where=text("status = 'PENDING'"),
        sqlite_where=text("status = 'PENDING'"),
    )


def downgrade() -> None:
    op.drop_index(
        "ix_access_requests_requester_class_pending",
        table_name="access_requests",
    )
    op.drop_table("access_requests")

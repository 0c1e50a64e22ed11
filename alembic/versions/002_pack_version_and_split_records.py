"""Add pack version counter and split records.

Revision ID: 002
Revises: 001
Create Date: 2026-03-09

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "lumber_packs",
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )

    op.create_table(
        "lumber_split_records",
        sa.Column("token", sa.String(255), primary_key=True),
        sa.Column(
            "pack_id",
            sa.UUID(),
            sa.ForeignKey("lumber_packs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "remainder_pack_id",
            sa.UUID(),
            sa.ForeignKey("lumber_packs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("finished_board_feet", sa.Numeric(12, 2), nullable=False),
        sa.Column("remainder_board_feet", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_lumber_split_records_pack_id", "lumber_split_records", ["pack_id"])


def downgrade() -> None:
    op.drop_table("lumber_split_records")
    op.drop_column("lumber_packs", "version")

"""Initial schema - loads, load items, packs and the pack progress view.

Revision ID: 001
Revises:
Create Date: 2026-03-02

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PACK_PROGRESS_VIEW = """
CREATE VIEW lumber_load_pack_progress AS
SELECT
    l.id AS load_id,
    (SELECT COUNT(*) FROM lumber_load_items i WHERE i.load_id = l.id) AS item_count,
    (SELECT COUNT(*) FROM lumber_load_items i
        WHERE i.load_id = l.id AND i.actual_footage IS NOT NULL) AS items_with_actual_footage,
    (SELECT COUNT(*) FROM lumber_load_items i
        WHERE i.load_id = l.id
        AND EXISTS (SELECT 1 FROM lumber_packs p WHERE p.load_item_id = i.id)) AS items_with_packs,
    (SELECT COUNT(*) FROM lumber_packs p WHERE p.load_id = l.id) AS pack_count,
    (SELECT COUNT(*) FROM lumber_packs p
        WHERE p.load_id = l.id AND p.is_finished) AS finished_pack_count
FROM lumber_loads l
"""


def upgrade() -> None:
    op.create_table(
        "lumber_loads",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("supplier_id", sa.UUID(), nullable=False),
        sa.Column("supplier_location_id", sa.UUID(), nullable=True),
        sa.Column("lumber_type", sa.String(20), nullable=True),
        sa.Column("pickup_or_delivery", sa.String(20), nullable=True),
        sa.Column("estimated_delivery_date", sa.Date(), nullable=True),
        sa.Column("actual_arrival_date", sa.Date(), nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("pickup_number", sa.String(100), nullable=True),
        sa.Column("plant", sa.String(100), nullable=True),
        sa.Column("pickup_date", sa.Date(), nullable=True),
        sa.Column("invoice_number", sa.String(100), nullable=True),
        sa.Column("invoice_total", sa.Numeric(12, 2), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("load_quality", sa.Integer(), nullable=True),
        sa.Column("is_entered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("po_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("po_generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("all_packs_tallied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("all_packs_finished", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("code", name="uq_lumber_loads_code"),
    )

    op.create_table(
        "lumber_load_items",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "load_id",
            sa.UUID(),
            sa.ForeignKey("lumber_loads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("species", sa.String(100), nullable=False),
        sa.Column("grade", sa.String(100), nullable=False),
        sa.Column("thickness", sa.String(10), nullable=False),
        sa.Column("estimated_footage", sa.Numeric(12, 2), nullable=True),
        sa.Column("actual_footage", sa.Numeric(12, 2), nullable=True),
        sa.Column("actual_footage_entered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_lumber_load_items_load_id", "lumber_load_items", ["load_id"])

    op.create_table(
        "lumber_packs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "load_id",
            sa.UUID(),
            sa.ForeignKey("lumber_loads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "load_item_id",
            sa.UUID(),
            sa.ForeignKey("lumber_load_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("pack_id", sa.String(50), nullable=False),
        sa.Column("length", sa.Integer(), nullable=True),
        sa.Column("tally_board_feet", sa.Numeric(12, 2), nullable=True),
        sa.Column("actual_board_feet", sa.Numeric(12, 2), nullable=True),
        sa.Column("rip_yield", sa.Numeric(7, 2), nullable=True),
        sa.Column("rip_comments", sa.Text(), nullable=True),
        sa.Column("is_finished", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("finished_at", sa.Date(), nullable=True),
        sa.Column("operator_id", sa.String(255), nullable=True),
        sa.Column("stacker_1_id", sa.String(255), nullable=True),
        sa.Column("stacker_2_id", sa.String(255), nullable=True),
        sa.Column("stacker_3_id", sa.String(255), nullable=True),
        sa.Column("stacker_4_id", sa.String(255), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("load_id", "pack_id", name="uq_lumber_packs_load_pack_id"),
    )
    op.create_index("ix_lumber_packs_load_item_id", "lumber_packs", ["load_item_id"])

    op.execute(PACK_PROGRESS_VIEW)


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS lumber_load_pack_progress")
    op.drop_table("lumber_packs")
    op.drop_table("lumber_load_items")
    op.drop_table("lumber_loads")

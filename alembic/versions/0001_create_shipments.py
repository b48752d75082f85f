"""create shipments

Revision ID: 0001
Revises:
Create Date: 2025-01-15 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

SHIPMENT_STATUSES = (
    "PENDING", "CREATED", "PICKED_UP", "IN_TRANSIT", "OUT_FOR_DELIVERY",
    "DELIVERED", "CANCELLED", "RETURNED", "FAILED",
)


def upgrade() -> None:
    op.create_table(
        "shipments",
        sa.Column("id", sa.String(length=50), primary_key=True),
        sa.Column("courier_id", sa.String(length=50), nullable=False),
        sa.Column("order_reference", sa.String(length=255), nullable=False),
        sa.Column("sender_details", sa.JSON(), nullable=False),
        sa.Column("receiver_details", sa.JSON(), nullable=False),
        sa.Column("dimensions", sa.JSON(), nullable=False),
        sa.Column("tracking_number", sa.String(length=100), nullable=True),
        sa.Column("courier_ref", sa.String(length=255), nullable=True),
        sa.Column("label_url", sa.String(length=1000), nullable=True),
        sa.Column("raw_response", sa.JSON(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*SHIPMENT_STATUSES, name="shipment_status", native_enum=False),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_shipments_courier_id", "shipments", ["courier_id"])
    op.create_index("ix_shipments_order_reference", "shipments", ["order_reference"])
    op.create_index("ix_shipments_tracking_number", "shipments", ["tracking_number"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_shipments_tracking_number", table_name="shipments")
    op.drop_index("ix_shipments_order_reference", table_name="shipments")
    op.drop_index("ix_shipments_courier_id", table_name="shipments")
    op.drop_table("shipments")

"""create bridge transactions table

Revision ID: 20261016_01
Revises: 
Create Date: 2026-10-16 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261016_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("source_tx_hash", sa.String(length=64), nullable=False),
        sa.Column("source_address", sa.String(length=35), nullable=False),
        sa.Column("source_amount", sa.String(length=40), nullable=False),
        sa.Column("instruction_type", sa.String(length=20), nullable=False),
        sa.Column("instruction_data", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=24), nullable=False, server_default="pending"),
        sa.Column("destination_account", sa.String(length=42)),
        sa.Column("destination_tx_hash", sa.Text()),
        sa.Column("error_message", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_transactions_source_tx_hash", "transactions", ["source_tx_hash"], unique=True)
    op.create_index("ix_transactions_source_address", "transactions", ["source_address"])
    op.create_index("ix_transactions_status", "transactions", ["status"])


def downgrade() -> None:
    op.drop_index("ix_transactions_status", table_name="transactions")
    op.drop_index("ix_transactions_source_address", table_name="transactions")
    op.drop_index("ix_transactions_source_tx_hash", table_name="transactions")
    op.drop_table("transactions")

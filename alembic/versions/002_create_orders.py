"""002: create orders table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              BIGSERIAL       PRIMARY KEY,
            account_id      BIGINT          NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
            amount          NUMERIC(12, 2)  NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_amount_gte_0   CHECK (amount >= 0),
            CONSTRAINT ck_orders_status         CHECK (status IN ('PENDING', 'PAID', 'CANCELLED'))
        );
    """)
    op.execute("CREATE INDEX idx_orders_account_id ON orders (account_id, created_at);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")

"""001: create UserBalances and TransactionHistory

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE "UserBalances" (
            user_id     VARCHAR(64) PRIMARY KEY,
            balance     BIGINT      NOT NULL DEFAULT 0,
            version     BIGINT      NOT NULL DEFAULT 0
        );
    """)
    op.execute("""
        CREATE TABLE "TransactionHistory" (
            idempotent_key  VARCHAR(128) PRIMARY KEY,
            user_id         VARCHAR(64)  NOT NULL,
            amount          BIGINT       NOT NULL,
            type            VARCHAR(10)  NOT NULL,
            transaction_id  VARCHAR(64)  NOT NULL,
            timestamp       VARCHAR(32)  NOT NULL,
            CONSTRAINT uq_transaction_history_transaction_id UNIQUE (transaction_id),
            CONSTRAINT ck_transaction_history_amount_gt_0    CHECK (amount > 0),
            CONSTRAINT ck_transaction_history_type
                CHECK (type IN ('credit', 'debit'))
        );
    """)
    op.execute(
        'CREATE INDEX ix_TransactionHistory_user_id ON "TransactionHistory" (user_id);'
    )
    op.execute("""COMMENT ON TABLE "TransactionHistory" IS 'append-only, one row per idempotent_key';""")


def downgrade() -> None:
    op.execute('DROP TABLE IF EXISTS "TransactionHistory";')
    op.execute('DROP TABLE IF EXISTS "UserBalances";')

"""001: create common functions and ledger tables

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
        CREATE OR REPLACE FUNCTION fn_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE user_balances (
            user_id           INTEGER     PRIMARY KEY,
            current_balance   BIGINT      NOT NULL DEFAULT 0,
            total_loaded      BIGINT      NOT NULL DEFAULT 0,
            total_used        BIGINT      NOT NULL DEFAULT 0,
            created_at        TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at        TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_user_balances_current_gte_0 CHECK (current_balance >= 0),
            CONSTRAINT ck_user_balances_used_gte_0    CHECK (total_used >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_user_balances_updated_at
            BEFORE UPDATE ON user_balances
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE balance_transactions (
            id              BIGSERIAL    PRIMARY KEY,
            user_id         INTEGER      NOT NULL REFERENCES user_balances (user_id),
            amount          BIGINT       NOT NULL,
            kind            VARCHAR(16)  NOT NULL,
            status          VARCHAR(16)  NOT NULL DEFAULT 'completed',
            balance_after   BIGINT       NOT NULL,
            description     TEXT,
            reference_id    VARCHAR(32),
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_balance_transactions_kind
                CHECK (kind IN ('purchase', 'refund', 'load', 'adjustment')),
            CONSTRAINT ck_balance_transactions_status
                CHECK (status IN ('pending', 'completed', 'failed'))
        );
    """)
    op.execute("""
        CREATE INDEX idx_balance_transactions_user_id
            ON balance_transactions (user_id, id DESC);
    """)
    op.execute("""
        CREATE INDEX idx_balance_transactions_reference
            ON balance_transactions (reference_id) WHERE reference_id IS NOT NULL;
    """)
    op.execute("COMMENT ON TABLE user_balances IS 'Agent prepaid balance in centavos';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS balance_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS user_balances CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_touch_updated_at();")

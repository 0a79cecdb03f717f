"""003: create bet limits, running totals and prize configuration

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bet_limits (
            id              SERIAL       PRIMARY KEY,
            bet_type        VARCHAR(16)  NOT NULL,
            limit_amount    BIGINT       NOT NULL,
            is_active       BOOLEAN      NOT NULL DEFAULT TRUE,
            created_by      INTEGER,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bet_limits_bet_type UNIQUE (bet_type),
            CONSTRAINT ck_bet_limits_bet_type CHECK (bet_type IN ('standard', 'rambolito')),
            CONSTRAINT ck_bet_limits_amount_gte_0 CHECK (limit_amount >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE bet_limits_per_draw (
            id               SERIAL       PRIMARY KEY,
            draw_id          INTEGER      NOT NULL REFERENCES draws (id),
            bet_combination  CHAR(3)      NOT NULL,
            bet_type         VARCHAR(16)  NOT NULL,
            limit_amount     BIGINT       NOT NULL,
            created_at       TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at       TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bet_limits_per_draw UNIQUE (draw_id, bet_combination, bet_type),
            CONSTRAINT ck_bet_limits_per_draw_amount_gte_0 CHECK (limit_amount >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE current_bet_totals (
            draw_id          INTEGER      NOT NULL REFERENCES draws (id),
            bet_combination  CHAR(3)      NOT NULL,
            bet_type         VARCHAR(16)  NOT NULL,
            total_amount     BIGINT       NOT NULL DEFAULT 0,
            ticket_count     INTEGER      NOT NULL DEFAULT 0,
            updated_at       TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            PRIMARY KEY (draw_id, bet_combination, bet_type),
            CONSTRAINT ck_current_bet_totals_amount_gte_0 CHECK (total_amount >= 0),
            CONSTRAINT ck_current_bet_totals_count_gte_0  CHECK (ticket_count >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE prize_configurations (
            id               SERIAL         PRIMARY KEY,
            prize_category   VARCHAR(24)    NOT NULL,
            multiplier       NUMERIC(10, 2) NOT NULL,
            is_active        BOOLEAN        NOT NULL DEFAULT TRUE,
            updated_at       TIMESTAMPTZ    NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_prize_configurations_category
                CHECK (prize_category IN ('standard', 'rambolito_double', 'rambolito')),
            CONSTRAINT ck_prize_configurations_multiplier_gt_0 CHECK (multiplier > 0)
        );
    """)
    # At most one active row per category.
    op.execute("""
        CREATE UNIQUE INDEX uq_prize_configurations_active
            ON prize_configurations (prize_category) WHERE is_active;
    """)
    for table in ("bet_limits", "bet_limits_per_draw", "prize_configurations"):
        op.execute(f"""
            CREATE TRIGGER trg_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
        """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS prize_configurations CASCADE;")
    op.execute("DROP TABLE IF EXISTS current_bet_totals CASCADE;")
    op.execute("DROP TABLE IF EXISTS bet_limits_per_draw CASCADE;")
    op.execute("DROP TABLE IF EXISTS bet_limits CASCADE;")

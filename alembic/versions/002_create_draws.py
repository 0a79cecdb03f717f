"""002: create draws and draw_results

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
        CREATE TABLE draws (
            id              SERIAL       PRIMARY KEY,
            draw_date       DATE         NOT NULL,
            time_slot       VARCHAR(8)   NOT NULL,
            status          VARCHAR(8)   NOT NULL DEFAULT 'open',
            cutoff_at       TIMESTAMPTZ  NOT NULL,
            winning_number  CHAR(3),
            settled_at      TIMESTAMPTZ,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_draws_date_slot UNIQUE (draw_date, time_slot),
            CONSTRAINT ck_draws_time_slot CHECK (time_slot IN ('twoPM', 'fivePM', 'ninePM')),
            CONSTRAINT ck_draws_status    CHECK (status IN ('open', 'closed', 'settled')),
            CONSTRAINT ck_draws_winning_number CHECK (winning_number ~ '^[0-9]{3}$'),
            CONSTRAINT ck_draws_settled_has_number
                CHECK (status <> 'settled' OR winning_number IS NOT NULL)
        );
    """)
    op.execute("""
        CREATE INDEX idx_draws_open_cutoff ON draws (cutoff_at) WHERE status = 'open';
    """)
    op.execute("""
        CREATE TRIGGER trg_draws_updated_at
            BEFORE UPDATE ON draws
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE draw_results (
            id              SERIAL       PRIMARY KEY,
            draw_id         INTEGER      NOT NULL REFERENCES draws (id),
            winning_number  CHAR(3)      NOT NULL,
            input_by        INTEGER,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_draw_results_draw_id UNIQUE (draw_id)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS draw_results CASCADE;")
    op.execute("DROP TABLE IF EXISTS draws CASCADE;")

"""004: create tickets, bets and winning_tickets

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tickets (
            id               VARCHAR(32)  PRIMARY KEY,
            ticket_number    CHAR(17)     NOT NULL,
            user_id          INTEGER      NOT NULL REFERENCES user_balances (user_id),
            draw_id          INTEGER      NOT NULL REFERENCES draws (id),
            total_amount     BIGINT       NOT NULL,
            status           VARCHAR(20)  NOT NULL DEFAULT 'pending',
            idempotency_key  VARCHAR(64),
            qr_payload       VARCHAR(64),
            created_at       TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at       TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_tickets_ticket_number UNIQUE (ticket_number),
            CONSTRAINT uq_tickets_user_idempotency_key UNIQUE (user_id, idempotency_key),
            CONSTRAINT ck_tickets_total_gt_0 CHECK (total_amount > 0),
            CONSTRAINT ck_tickets_status CHECK (status IN (
                'pending', 'won', 'lost', 'pending_approval', 'claimed', 'cancelled'
            ))
        );
    """)
    op.execute("CREATE INDEX idx_tickets_draw_status ON tickets (draw_id, status);")
    op.execute("CREATE INDEX idx_tickets_user_draw ON tickets (user_id, draw_id);")
    op.execute("""
        CREATE TRIGGER trg_tickets_updated_at
            BEFORE UPDATE ON tickets
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE bets (
            id               BIGSERIAL    PRIMARY KEY,
            ticket_id        VARCHAR(32)  NOT NULL REFERENCES tickets (id),
            sequence         CHAR(1)      NOT NULL,
            bet_type         VARCHAR(16)  NOT NULL,
            bet_combination  CHAR(3)      NOT NULL,
            bet_amount       BIGINT       NOT NULL,
            CONSTRAINT uq_bets_ticket_sequence UNIQUE (ticket_id, sequence),
            CONSTRAINT ck_bets_bet_type CHECK (bet_type IN ('standard', 'rambolito')),
            CONSTRAINT ck_bets_combination CHECK (bet_combination ~ '^[0-9]{3}$'),
            CONSTRAINT ck_bets_amount_gt_0 CHECK (bet_amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_bets_combination ON bets (bet_combination, bet_type);")
    op.execute("""
        CREATE TABLE winning_tickets (
            id             BIGSERIAL    PRIMARY KEY,
            ticket_id      VARCHAR(32)  NOT NULL REFERENCES tickets (id),
            draw_id        INTEGER      NOT NULL REFERENCES draws (id),
            prize_amount   BIGINT       NOT NULL,
            created_at     TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_winning_tickets_ticket_id UNIQUE (ticket_id),
            CONSTRAINT ck_winning_tickets_prize_gte_0 CHECK (prize_amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_winning_tickets_draw_id ON winning_tickets (draw_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS winning_tickets CASCADE;")
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
    op.execute("DROP TABLE IF EXISTS tickets CASCADE;")

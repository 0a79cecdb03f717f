"""005: seed default caps and prize multipliers

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Caps in centavos: standard ₱10,000, rambolito ₱5,000 per number per draw.
    op.execute("""
        INSERT INTO bet_limits (bet_type, limit_amount, is_active) VALUES
            ('standard',  1000000, TRUE),
            ('rambolito',  500000, TRUE)
        ON CONFLICT (bet_type) DO NOTHING;
    """)
    op.execute("""
        INSERT INTO prize_configurations (prize_category, multiplier, is_active) VALUES
            ('standard',         450, TRUE),
            ('rambolito_double', 150, TRUE),
            ('rambolito',         75, TRUE);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM prize_configurations;")
    op.execute("DELETE FROM bet_limits WHERE bet_type IN ('standard', 'rambolito');")

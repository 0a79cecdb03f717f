"""Pydantic schemas and cursor utilities for lt_ledger API."""

import base64
import binascii
import json

from pydantic import BaseModel

from src.lt_common.money import centavos_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: int
    current_balance_centavos: int
    current_balance_display: str
    total_loaded_centavos: int
    total_used_centavos: int

    @classmethod
    def from_centavos(
        cls, user_id: int, current: int, loaded: int, used: int
    ) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            current_balance_centavos=current,
            current_balance_display=centavos_to_display(current),
            total_loaded_centavos=loaded,
            total_used_centavos=used,
        )


class TransactionItem(BaseModel):
    id: int
    kind: str
    status: str
    amount_centavos: int
    amount_display: str
    balance_after_centavos: int
    balance_after_display: str
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool

"""Integration tests for the purchase flow: buy → replay → cap race → refund → settle.

Requires a running PostgreSQL DB with migrations applied (alembic upgrade head).
Each test seeds its own agent so balances never leak between tests. Draws are
shared, so combinations are randomised and caps are set relative to what is
already sold.
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient

from flow_helpers import (
    random_combination,
    seed_agent,
    set_override,
    sold_total,
    tomorrow_draw_id,
)

pytestmark = pytest.mark.asyncio(loop_scope="session")

AGENT_FUNDS = 1_000_000  # ₱10,000


def _body(draw_id: int, combination: str, amount: str = "10") -> dict:
    return {
        "draw_id": draw_id,
        "bets": [{"bet_type": "standard", "bet_combination": combination, "bet_amount": amount}],
    }


class TestPurchaseFlow:
    async def test_purchase_debits_balance_and_records_transaction(
        self, client: AsyncClient
    ) -> None:
        _, headers = await seed_agent(AGENT_FUNDS)
        draw_id = await tomorrow_draw_id(client, headers)

        resp = await client.post(
            "/api/v1/tickets", json=_body(draw_id, random_combination()), headers=headers
        )

        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        assert data["remaining_balance_centavos"] == AGENT_FUNDS - 1000

        balance = await client.get("/api/v1/account/balance", headers=headers)
        assert balance.json()["data"]["current_balance_centavos"] == AGENT_FUNDS - 1000

        txs = await client.get("/api/v1/account/transactions", headers=headers)
        items = txs.json()["data"]["items"]
        assert items[0]["reference_id"] == data["ticket_id"]
        assert items[0]["amount_centavos"] == -1000

    async def test_idempotency_key_replays_once(self, client: AsyncClient) -> None:
        _, headers = await seed_agent(AGENT_FUNDS)
        draw_id = await tomorrow_draw_id(client, headers)
        keyed = {**headers, "Idempotency-Key": uuid.uuid4().hex}
        body = _body(draw_id, random_combination())

        results = await asyncio.gather(
            *(client.post("/api/v1/tickets", json=body, headers=keyed) for _ in range(5))
        )

        assert all(r.status_code == 201 for r in results), [r.text for r in results]
        assert len({r.json()["data"]["ticket_id"] for r in results}) == 1
        balance = await client.get("/api/v1/account/balance", headers=headers)
        assert balance.json()["data"]["current_balance_centavos"] == AGENT_FUNDS - 1000

    async def test_concurrent_buyers_never_exceed_cap(self, client: AsyncClient) -> None:
        agents = [await seed_agent(AGENT_FUNDS) for _ in range(8)]
        draw_id = await tomorrow_draw_id(client, agents[0][1])
        combination = random_combination()
        already = await sold_total(draw_id, combination, "standard")
        await set_override(draw_id, combination, "standard", already + 3000)

        results = await asyncio.gather(*(
            client.post("/api/v1/tickets", json=_body(draw_id, combination), headers=headers)
            for _, headers in agents
        ))

        accepted = [r for r in results if r.status_code == 201]
        rejected = [r for r in results if r.status_code != 201]
        assert len(accepted) == 3
        assert {r.json()["code"] for r in rejected} == {5001}
        assert await sold_total(draw_id, combination, "standard") == already + 3000

    async def test_refund_restores_balance_and_capacity(self, client: AsyncClient) -> None:
        _, headers = await seed_agent(AGENT_FUNDS)
        draw_id = await tomorrow_draw_id(client, headers)
        combination = random_combination()
        before = await sold_total(draw_id, combination, "standard")

        created = await client.post(
            "/api/v1/tickets", json=_body(draw_id, combination, "25"), headers=headers
        )
        ticket_id = created.json()["data"]["ticket_id"]
        refund = await client.post(
            f"/api/v1/tickets/{ticket_id}/refund", json={"reason": "misprint"}, headers=headers
        )

        assert refund.status_code == 200, refund.text
        assert refund.json()["data"]["current_balance_centavos"] == AGENT_FUNDS
        assert await sold_total(draw_id, combination, "standard") == before

        detail = await client.get(f"/api/v1/tickets/{ticket_id}", headers=headers)
        assert detail.json()["data"]["status"] == "refunded"

    async def test_other_agent_cannot_read_ticket(self, client: AsyncClient) -> None:
        _, owner = await seed_agent(AGENT_FUNDS)
        _, stranger = await seed_agent(AGENT_FUNDS)
        draw_id = await tomorrow_draw_id(client, owner)
        created = await client.post(
            "/api/v1/tickets", json=_body(draw_id, random_combination()), headers=owner
        )
        ticket_id = created.json()["data"]["ticket_id"]

        resp = await client.get(f"/api/v1/tickets/{ticket_id}", headers=stranger)

        assert resp.status_code == 404

    async def test_limit_check_reflects_sales(self, client: AsyncClient) -> None:
        _, headers = await seed_agent(AGENT_FUNDS)
        draw_id = await tomorrow_draw_id(client, headers)
        combination = random_combination()
        before = await client.get(
            f"/api/v1/bet-limits/check/{draw_id}/{combination}/standard", headers=headers
        )

        await client.post("/api/v1/tickets", json=_body(draw_id, combination), headers=headers)

        after = await client.get(
            f"/api/v1/bet-limits/check/{draw_id}/{combination}/standard", headers=headers
        )
        assert (
            before.json()["data"]["remaining_amount_centavos"]
            - after.json()["data"]["remaining_amount_centavos"]
        ) == 1000

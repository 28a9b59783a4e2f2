from __future__ import annotations

from fastapi.testclient import TestClient

from scythebidder.web.app import app


def test_web_endpoints_auction_flow() -> None:
    client = TestClient(app)
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

    base = "/api/v1/auction"
    r = client.post(base, json={"players": ["Ann", "Bo", "Cy", "Di"], "seed": 31})
    assert r.status_code == 200
    sid = r.json()["session"]

    # Each acting seat takes the first unclaimed combination at its minimum bid.
    steps = 0
    while True:
        r = client.get(f"{base}/{sid}")
        assert r.status_code == 200
        data = r.json()
        if data["done"]:
            break
        assert data["current_name"] in {"Ann", "Bo", "Cy", "Di"}
        holding = {seat["index"] for seat in data["play_order"] if seat["holding"]}
        assert data["current_seat"] not in holding
        combo = next(c for c in data["combinations"] if "holder" not in c)
        r2 = client.post(
            f"{base}/{sid}/bid",
            json={"seat": data["current_seat"], "faction": combo["faction"], "amount": combo["minimum_bid"]},
        )
        assert r2.status_code == 200
        steps += 1
        assert steps <= 4

    assert steps == 4
    assert {c["holder_name"] for c in data["combinations"]} == {"Ann", "Bo", "Cy", "Di"}
    assert data["log"][-1] == "Auction ended"

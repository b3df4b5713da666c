"""
Pytest tests for the HTTP API (users, wallets, trades, analytics) via FastAPI TestClient.
"""

from __future__ import annotations

import json

import pytest

from conftest import epoch

TRADE = {
    "wallet_id": "wallet-1",
    "amount": 1000.0,
    "chain": "Ethereum",
    "trade_type": "MarketBuy",
    "asset": "ETH",
    "before_price": 90.0,
    "execution_price": 100.0,
    "final_price": 105.0,
    "traded_amount": 12.0,
    "timestamp": epoch(2022, 1, 5),
}

RANGE = {"start_date": "2022-01-01", "end_date": "2022-01-31"}


def _me(client, headers):
    users = client.get("/user", headers=headers).json()
    return users[0]


def _post_trade(client, headers, user_id, **overrides):
    body = dict(TRADE, user_id=user_id, **overrides)
    return client.post("/trade", json=body, headers=headers)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_guarded_routes_need_token(client):
    r = client.get("/trade")
    assert r.status_code == 401
    assert r.json() == {"detail": "missing token"}
    r = client.get("/user", headers={"Authorization": "not-a-jwt"})
    assert r.status_code == 401
    assert r.json() == {"detail": "invalid token"}


def test_register_hides_password(client):
    r = client.post("/user", json={"name": "Ada", "email": "ada@example.com", "password": "pw"})
    assert r.status_code == 200
    body = r.json()
    assert "password_hash" not in body
    assert body["email"] == "ada@example.com"
    r = client.post("/user", json={"name": "Ada", "email": "ada@example.com", "password": "pw"})
    assert r.status_code == 400
    assert r.json() == {"detail": "Email already exists"}


def test_login_bad_password(client, auth_headers):
    r = client.post("/login", json={"email": "ada@example.com", "password": "nope"})
    assert r.status_code == 401


def test_trade_crud(client, auth_headers):
    me = _me(client, auth_headers)
    r = _post_trade(client, auth_headers, me["id"], wallet_id=me["wallet_id"])
    assert r.status_code == 200
    trade = r.json()
    assert trade["execution_fee"] == pytest.approx(3.6)
    assert trade["transaction_fee"] == pytest.approx(0.5)
    assert trade["created_at"].startswith("2022-01-05T12:00:00")

    r = client.get(f"/trade/{trade['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == trade

    r = client.put(
        f"/trade/{trade['id']}",
        json=dict(TRADE, user_id=me["id"], execution_price=200.0),
        headers=auth_headers,
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["execution_fee"] == pytest.approx(7.2)
    assert updated["transaction_fee"] == pytest.approx(1.0)

    assert len(client.get("/trade", headers=auth_headers).json()) == 1

    r = client.delete(f"/trade/{trade['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True}
    r = client.delete(f"/trade/{trade['id']}", headers=auth_headers)
    assert r.json() == {"deleted": True}
    assert client.get(f"/trade/{trade['id']}", headers=auth_headers).status_code == 404


def test_create_trade_invalid_chain(client, auth_headers):
    me = _me(client, auth_headers)
    r = _post_trade(client, auth_headers, me["id"], chain="Solana")
    assert r.status_code == 400
    assert "chain" in r.json()["detail"]
    assert client.get("/trade", headers=auth_headers).json() == []


def test_update_trade_invalid_asset(client, auth_headers):
    me = _me(client, auth_headers)
    trade = _post_trade(client, auth_headers, me["id"]).json()
    r = client.put(f"/trade/{trade['id']}", json=dict(TRADE, user_id=me["id"], asset="SOL"), headers=auth_headers)
    assert r.status_code == 400
    assert client.get(f"/trade/{trade['id']}", headers=auth_headers).json()["asset"] == "ETH"


def test_analytics_require_query_params(client, auth_headers):
    for path in ("/profit-loss", "/cumulative-fees", "/slippage"):
        r = client.get(path, params={"start_date": "2022-01-01", "end_date": "2022-01-31"}, headers=auth_headers)
        assert r.status_code == 400
        assert r.json() == {"detail": "Error: Start date, End date and Trader ID are required"}


def test_analytics_endpoints(client, auth_headers):
    me = _me(client, auth_headers)
    _post_trade(client, auth_headers, me["id"])
    params = dict(RANGE, trader_id=me["id"])

    r = client.get("/profit-loss", params=params, headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == [{"date": "2022-01-05", "profit": 56.0, "loss": 0.0}]

    r = client.get("/profit-loss", params=dict(params, asset="BTC"), headers=auth_headers)
    assert r.json() == []

    r = client.get("/profit-loss", params=dict(params, trade_type="MarketBuy"), headers=auth_headers)
    assert len(r.json()) == 1

    r = client.get("/cumulative-fees", params=params, headers=auth_headers)
    assert r.json() == {"trader_id": me["id"], "cumulative_fees": 4.0}

    r = client.get("/slippage", params=params, headers=auth_headers)
    body = r.json()
    assert body["trader_id"] == me["id"]
    assert body["total_slippage"] == 10.0
    assert body["average_slippage_cost_percent"] == 11.0
    assert body["trade_count"] == 1


def test_analytics_empty_range(client, auth_headers):
    me = _me(client, auth_headers)
    params = {"start_date": "2020-01-01", "end_date": "2020-12-31", "trader_id": me["id"]}
    assert client.get("/profit-loss", params=params, headers=auth_headers).json() == []
    assert client.get("/cumulative-fees", params=params, headers=auth_headers).json()["cumulative_fees"] == 0.0
    slip = client.get("/slippage", params=params, headers=auth_headers).json()
    assert slip["total_slippage"] == 0.0
    assert slip["average_slippage"] == 0.0


def test_wallet_endpoints(client, auth_headers):
    me = _me(client, auth_headers)
    r = client.get(f"/wallet/{me['wallet_id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["balance"] == 0.0
    assert len(r.json()["public_hash"]) == 64

    r = client.put(f"/wallet/{me['wallet_id']}/balance", json={"balance": 250.0}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["balance"] == 250.0

    assert client.get("/wallet/unknown", headers=auth_headers).status_code == 404


def test_user_update_and_delete(client, auth_headers):
    me = _me(client, auth_headers)
    r = client.put(
        f"/user/{me['id']}",
        json={"name": "Ada Lovelace", "email": "ada@example.com", "password": "new-pw"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Ada Lovelace"
    assert r.json()["wallet_id"] == me["wallet_id"]
    assert client.post("/login", json={"email": "ada@example.com", "password": "new-pw"}).status_code == 200

    assert client.delete(f"/user/{me['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/user/{me['id']}", headers=auth_headers).status_code == 404


def test_create_trade_rejects_non_finite_numbers(client, auth_headers):
    me = _me(client, auth_headers)
    for field, value in (("execution_price", float("inf")), ("traded_amount", float("nan"))):
        # stdlib json writes the Infinity/NaN literals the API must refuse
        body = json.dumps(dict(TRADE, user_id=me["id"], **{field: value}))
        r = client.post("/trade", content=body, headers={**auth_headers, "Content-Type": "application/json"})
        assert r.status_code == 422
    assert client.get("/trade", headers=auth_headers).json() == []
    params = dict(RANGE, trader_id=me["id"])
    assert client.get("/cumulative-fees", params=params, headers=auth_headers).status_code == 200
    assert client.get("/profit-loss", params=params, headers=auth_headers).status_code == 200


def test_set_balance_rejects_infinity(client, auth_headers):
    me = _me(client, auth_headers)
    body = json.dumps({"balance": float("inf")})
    r = client.put(
        f"/wallet/{me['wallet_id']}/balance",
        content=body,
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert r.status_code == 422
    assert client.get(f"/wallet/{me['wallet_id']}", headers=auth_headers).json()["balance"] == 0.0


def test_create_trade_timestamp_out_of_range(client, auth_headers):
    me = _me(client, auth_headers)
    r = _post_trade(client, auth_headers, me["id"], timestamp=10**12)
    assert r.status_code == 400
    assert r.json()["detail"].startswith("timestamp out of range")
    assert client.get("/trade", headers=auth_headers).json() == []

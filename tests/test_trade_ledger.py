"""
Tests for trade normalization, fee derivation and ledger writes.
"""

from __future__ import annotations

import itertools
from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from backend_journal.core.exceptions import NotFoundError, ValidationError
from backend_journal.domain.enums import Asset, Chain, TradeType
from backend_journal.ledger import normalize_trade
from conftest import epoch

ALL_COMBOS = list(itertools.product(Chain, TradeType, Asset))


def test_normalize_derives_fees(make_form):
    """MarketBuy 10 @ 100: execution fee 10*100*0.003 = 3, transaction fee 100*0.005 = 0.5."""
    trade = normalize_trade(make_form())
    assert trade.id == ""
    assert trade.execution_fee == pytest.approx(3.0)
    assert trade.transaction_fee == pytest.approx(0.5)
    assert trade.created_at == datetime(2022, 1, 5, 12, 0)


def test_normalize_defaults_missing_optionals(make_form):
    trade = normalize_trade(
        make_form(before_price=None, execution_price=None, final_price=None, traded_amount=None, timestamp=None)
    )
    assert trade.before_price == 0.0
    assert trade.execution_price == 0.0
    assert trade.final_price == 0.0
    assert trade.traded_amount == 0.0
    assert trade.execution_fee == 0.0
    assert trade.transaction_fee == 0.0
    assert trade.created_at is not None
    assert trade.created_at.year >= 2024


def test_normalize_fee_with_zero_amount_still_charges_transaction_fee(make_form):
    trade = normalize_trade(make_form(traded_amount=None, execution_price=40.0))
    assert trade.execution_fee == 0.0
    assert trade.transaction_fee == pytest.approx(0.2)


@pytest.mark.parametrize("chain,trade_type,asset", ALL_COMBOS)
def test_create_accepts_every_valid_combination(ledger, make_form, chain, trade_type, asset):
    form = make_form(chain=chain.value, trade_type=trade_type.value, asset=asset.value, execution_price=20.0, traded_amount=3.0)
    stored = ledger.create(normalize_trade(form))
    assert stored.chain is chain
    assert stored.trade_type is trade_type
    assert stored.asset is asset
    assert stored.execution_fee == pytest.approx(20.0 * 3.0 * 0.003)
    assert stored.transaction_fee == pytest.approx(20.0 * 0.005)


def test_create_returns_stored_record(ledger, make_form):
    stored = ledger.create(normalize_trade(make_form()))
    assert len(stored.id) == 36
    again = ledger.get(stored.id)
    assert again == stored
    assert stored.user_id == "trader-1"
    assert stored.wallet_id == "wallet-1"
    assert stored.amount == 1000.0
    assert stored.before_price == 90.0
    assert stored.final_price == 105.0


@pytest.mark.parametrize(
    "field,value",
    [
        ("chain", "Solana"),
        ("chain", "ethereum"),
        ("trade_type", "StopLoss"),
        ("asset", "SOL"),
        ("chain", ""),
        ("asset", ""),
    ],
)
def test_create_rejects_invalid_fields_without_writing(ledger, make_form, field, value):
    with pytest.raises(ValidationError):
        ledger.create(normalize_trade(make_form(**{field: value})))
    assert ledger.list() == []


def test_update_overwrites_and_keeps_given_fees(ledger, make_form):
    stored = ledger.create(normalize_trade(make_form()))
    changed = normalize_trade(make_form(asset="BTC", trade_type="LimitSell", execution_price=200.0))
    changed.execution_fee = 1.25
    changed.transaction_fee = 2.5
    updated = ledger.update(stored.id, changed)
    assert updated.id == stored.id
    assert updated.asset is Asset.BTC
    assert updated.trade_type is TradeType.LIMIT_SELL
    assert updated.execution_price == 200.0
    assert updated.execution_fee == 1.25
    assert updated.transaction_fee == 2.5
    assert updated.created_at == stored.created_at
    assert updated.updated_at >= stored.updated_at


def test_update_rejects_invalid_and_leaves_record(ledger, make_form):
    stored = ledger.create(normalize_trade(make_form()))
    with pytest.raises(ValidationError):
        ledger.update(stored.id, normalize_trade(make_form(chain="Bitcoin", execution_price=1.0)))
    assert ledger.get(stored.id) == stored


def test_update_unknown_id(ledger, make_form):
    with pytest.raises(NotFoundError):
        ledger.update("missing-id", normalize_trade(make_form()))


def test_delete_is_idempotent(ledger, make_form):
    stored = ledger.create(normalize_trade(make_form()))
    assert ledger.delete(stored.id) is True
    assert ledger.delete(stored.id) is True
    with pytest.raises(NotFoundError):
        ledger.get(stored.id)


def test_list_newest_first(ledger, make_form):
    older = ledger.create(normalize_trade(make_form(timestamp=epoch(2022, 1, 1))))
    newer = ledger.create(normalize_trade(make_form(timestamp=epoch(2022, 3, 1))))
    assert [t.id for t in ledger.list()] == [newer.id, older.id]


def test_trade_does_not_move_wallet_balance(ledger, wallets, make_form):
    wallet = wallets.create()
    ledger.create(normalize_trade(make_form(wallet_id=wallet.id)))
    assert wallets.get(wallet.id).balance == 0.0


def test_normalize_rejects_out_of_range_timestamp(make_form):
    with pytest.raises(ValidationError, match="timestamp out of range"):
        normalize_trade(make_form(timestamp=10**12))


def test_normalize_rejects_overflowing_fee(make_form):
    with pytest.raises(ValidationError, match="non-finite fee"):
        normalize_trade(make_form(execution_price=1e200, traded_amount=1e200))


@pytest.mark.parametrize("value", [float("inf"), float("nan")])
def test_form_rejects_non_finite_numbers(make_form, value):
    with pytest.raises(PydanticValidationError):
        make_form(execution_price=value)

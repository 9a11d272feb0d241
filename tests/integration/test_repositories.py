"""Integration tests for repository CRUD operations."""

import dataclasses
from datetime import datetime
from decimal import Decimal

import pytest

from investment_tracker.core.exceptions import InvalidTransactionError, TransactionNotFoundError
from investment_tracker.core.models import Ticker, Transaction, TransactionType
from investment_tracker.data.repositories.tickers_repo import TickersRepository
from investment_tracker.data.repositories.transactions_repo import TransactionsRepository


def _tx(symbol="INFY", tx_type="BUY", quantity=10, price=100, date="2023-01-01", broker=""):
    return Transaction(
        symbol=symbol,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        transaction_date=datetime.fromisoformat(date),
        transaction_type=TransactionType(tx_type),
        broker=broker,
    )


class TestTransactionsRepository:
    def test_create_and_get(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx(symbol=" infy ", quantity="2.5", price="1450.75", broker="Zerodha"))

        assert tx.id is not None
        assert tx.created_at is not None

        fetched = repo.get_by_id(tx.id)
        assert fetched.symbol == "INFY"
        assert fetched.quantity == Decimal("2.5")
        assert fetched.price == Decimal("1450.75")
        assert fetched.transaction_date == datetime(2023, 1, 1)
        assert fetched.transaction_type == TransactionType.BUY
        assert fetched.currency == "INR"
        assert fetched.broker == "Zerodha"

    def test_get_missing(self, isolated_db):
        assert TransactionsRepository().get_by_id(999) is None

    @pytest.mark.parametrize("field, value", [
        ("symbol", "  "),
        ("quantity", Decimal("0")),
        ("price", Decimal("-1")),
        ("quantity", Decimal("Infinity")),
        ("price", Decimal("Infinity")),
        ("quantity", Decimal("NaN")),
        ("price", Decimal("-NaN")),
    ])
    def test_create_rejects_invalid(self, isolated_db, field, value):
        repo = TransactionsRepository()
        with pytest.raises(InvalidTransactionError):
            repo.create(dataclasses.replace(_tx(), **{field: value}))
        assert repo.list_all() == []

    def test_update_replaces_all_fields(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx())
        updated = repo.update(dataclasses.replace(
            tx, symbol="tcs", quantity=Decimal("3"), price=Decimal("3500"),
            transaction_type=TransactionType.SELL, transaction_date=datetime(2024, 2, 1),
        ))
        assert updated.id == tx.id
        assert updated.symbol == "TCS"
        assert updated.quantity == Decimal("3")
        assert updated.transaction_type == TransactionType.SELL
        assert updated.transaction_date == datetime(2024, 2, 1)
        assert len(repo.list_all()) == 1

    def test_update_missing_id_raises(self, isolated_db):
        repo = TransactionsRepository()
        with pytest.raises(TransactionNotFoundError):
            repo.update(dataclasses.replace(_tx(), id=42))
        with pytest.raises(TransactionNotFoundError):
            repo.update(_tx())

    def test_delete(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx())
        assert repo.delete(tx.id) is True
        assert repo.get_by_id(tx.id) is None
        assert repo.delete(tx.id) is False

    def test_ids_not_reused_after_delete(self, isolated_db):
        repo = TransactionsRepository()
        first = repo.create(_tx())
        second = repo.create(_tx())
        repo.delete(second.id)
        third = repo.create(_tx())
        assert third.id > second.id > first.id

    def test_list_all_chronological(self, isolated_db):
        repo = TransactionsRepository()
        repo.create(_tx(symbol="B", date="2023-05-01"))
        repo.create(_tx(symbol="A", date="2023-01-01"))
        repo.create(_tx(symbol="C", date="2023-05-01"))
        assert [t.symbol for t in repo.list_all()] == ["A", "B", "C"]

    def test_list_by_symbol(self, isolated_db):
        repo = TransactionsRepository()
        repo.create(_tx(symbol="INFY"))
        repo.create(_tx(symbol="TCS"))
        repo.create(_tx(symbol="INFY", tx_type="SELL", quantity=1))
        assert len(repo.list_by_symbol("infy")) == 2


class TestImportMany:
    def test_imports_all(self, isolated_db):
        repo = TransactionsRepository()
        count = repo.import_many([_tx(symbol="infy"), _tx(symbol="TCS", date="2023-02-01")])
        assert count == 2
        assert [t.symbol for t in repo.list_all()] == ["INFY", "TCS"]

    def test_invalid_row_stores_nothing(self, isolated_db):
        repo = TransactionsRepository()
        repo.create(_tx(symbol="EXISTING"))
        with pytest.raises(InvalidTransactionError):
            repo.import_many([_tx(symbol="INFY"), _tx(symbol="TCS", quantity=0)])
        assert [t.symbol for t in repo.list_all()] == ["EXISTING"]

    def test_non_finite_row_stores_nothing(self, isolated_db):
        repo = TransactionsRepository()
        with pytest.raises(InvalidTransactionError):
            repo.import_many([_tx(symbol="INFY"), _tx(symbol="TCS", price="NaN")])
        assert repo.list_all() == []

    def test_offset_date_round_trips_as_naive(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx(date="2023-01-01T10:00:00+05:30"))
        expected = datetime.fromisoformat("2023-01-01T10:00:00+05:30").astimezone().replace(tzinfo=None)
        assert repo.get_by_id(tx.id).transaction_date == expected

    def test_failure_mid_batch_rolls_back(self, isolated_db, monkeypatch):
        repo = TransactionsRepository()
        real_insert = repo._insert
        calls = []

        def flaky_insert(obj):
            calls.append(obj)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return real_insert(obj)

        monkeypatch.setattr(repo, "_insert", flaky_insert)
        with pytest.raises(RuntimeError):
            repo.import_many([_tx(symbol="A"), _tx(symbol="B"), _tx(symbol="C")])
        assert TransactionsRepository().list_all() == []


class TestTickersRepository:
    def test_replace_snapshot(self, isolated_db):
        repo = TickersRepository()
        repo.replace_snapshot([
            Ticker(symbol="INFY", current_price=Decimal("1500")),
            Ticker(symbol="TCS", current_price=Decimal("3500")),
        ])
        repo.replace_snapshot([Ticker(symbol="HDFCBANK", current_price=Decimal("1600"))])

        assert [t.symbol for t in repo.list_all()] == ["HDFCBANK"]
        assert repo.get("INFY") is None

    def test_duplicates_last_wins(self, isolated_db):
        repo = TickersRepository()
        snapshot = repo.replace_snapshot([
            Ticker(symbol="infy", current_price=Decimal("1")),
            Ticker(symbol="INFY ", current_price=Decimal("2")),
        ])
        assert len(snapshot) == 1
        assert snapshot[0].current_price == Decimal("2")

    def test_get_is_case_insensitive(self, isolated_db):
        repo = TickersRepository()
        repo.replace_snapshot([Ticker(symbol="INFY", current_price=Decimal("1500"), sector="IT")])
        t = repo.get(" infy")
        assert t.sector == "IT"
        assert t.updated_at is not None

    def test_previous_close_none_and_zero_are_distinct(self, isolated_db):
        repo = TickersRepository()
        repo.replace_snapshot([
            Ticker(symbol="A", current_price=Decimal("10")),
            Ticker(symbol="B", current_price=Decimal("10"), previous_close=Decimal("0")),
        ])
        quotes = repo.as_map()
        assert quotes["A"].previous_close is None
        assert quotes["B"].previous_close == Decimal("0")

    def test_failed_replace_keeps_previous(self, isolated_db, monkeypatch):
        repo = TickersRepository()
        repo.replace_snapshot([Ticker(symbol="INFY", current_price=Decimal("1500"))])

        def broken_insert(obj):
            raise RuntimeError("boom")

        monkeypatch.setattr(repo, "_insert", broken_insert)
        with pytest.raises(RuntimeError):
            repo.replace_snapshot([Ticker(symbol="TCS", current_price=Decimal("3500"))])
        assert [t.symbol for t in TickersRepository().list_all()] == ["INFY"]

"""Repository for the transaction ledger: add, edit, remove, import."""

import dataclasses
from typing import Optional

from ...core.exceptions import InvalidTransactionError, TransactionNotFoundError
from ...core.models import Transaction
from ..query import BaseRepository, RowMapper


def validate(tx: Transaction) -> None:
    """Reject records that cannot be part of a ledger."""
    if not tx.symbol.strip():
        raise InvalidTransactionError("Symbol must not be empty")
    if not tx.quantity.is_finite() or not tx.price.is_finite():
        raise InvalidTransactionError("Quantity and price must be finite numbers")
    if tx.quantity <= 0:
        raise InvalidTransactionError(f"Quantity must be positive, got {tx.quantity}")
    if tx.price <= 0:
        raise InvalidTransactionError(f"Price must be positive, got {tx.price}")


class TransactionsRepository(BaseRepository[Transaction]):
    _table = "transactions"
    _mapper = RowMapper(Transaction)

    def create(self, tx: Transaction) -> Transaction:
        validate(tx)
        tx = dataclasses.replace(tx, symbol=tx.symbol.strip().upper())
        return self.get(self._insert(tx))

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        return self.get(tx_id)

    def update(self, tx: Transaction) -> Transaction:
        """Replace every field of the stored transaction with the same id."""
        if tx.id is None:
            raise TransactionNotFoundError("Transaction has no id")
        validate(tx)
        tx = dataclasses.replace(tx, symbol=tx.symbol.strip().upper())
        if not self._update(tx):
            raise TransactionNotFoundError(f"Transaction {tx.id} not found")
        return self.get(tx.id)

    def list_all(self) -> list[Transaction]:
        """Ledger in chronological order, insertion order on equal dates."""
        rows = self._query().order_by("transaction_date, id").fetch_all(self._db().conn)
        return self._mapper.map_all(rows)

    def list_by_symbol(self, symbol: str) -> list[Transaction]:
        rows = (
            self._query()
            .where("symbol = ?", symbol.strip().upper())
            .order_by("transaction_date, id")
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)

    def import_many(self, transactions: list[Transaction]) -> int:
        """Append transactions atomically: either all are stored or none."""
        for tx in transactions:
            validate(tx)
        db = self._db()
        with db.transaction():
            for tx in transactions:
                self._insert(dataclasses.replace(tx, symbol=tx.symbol.strip().upper()))
        return len(transactions)

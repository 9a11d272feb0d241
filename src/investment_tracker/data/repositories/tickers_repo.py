"""Repository for the latest ticker (quote) snapshot."""

import dataclasses
from datetime import datetime
from typing import Optional

from ...core.models import Ticker
from ..query import BaseRepository, RowMapper


class TickersRepository(BaseRepository[Ticker]):
    _table = "tickers"
    _key = "symbol"
    _mapper = RowMapper(Ticker)
    _insert_skip = frozenset()

    def replace_snapshot(self, tickers: list[Ticker]) -> list[Ticker]:
        """Swap the whole snapshot in one commit."""
        now = datetime.now()
        db = self._db()
        with db.transaction():
            db.conn.execute(f"DELETE FROM {self._table}")
            # Later entries for the same symbol win
            for t in {t.key: t for t in tickers}.values():
                self._insert(dataclasses.replace(
                    t, symbol=t.key, updated_at=t.updated_at or now,
                ))
        return self.list_all()

    def get(self, symbol: str) -> Optional[Ticker]:
        return super().get(symbol.strip().upper())

    def list_all(self) -> list[Ticker]:
        rows = self._query().order_by("symbol").fetch_all(self._db().conn)
        return self._mapper.map_all(rows)

    def as_map(self) -> dict[str, Ticker]:
        return {t.symbol: t for t in self.list_all()}

"""Ticker table published by a spreadsheet web app (JSON over HTTP)."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests

from ..core.exceptions import TickerFetchError
from ..core.models import Ticker

logger = logging.getLogger(__name__)


def _optional_decimal(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def parse_ticker(row: dict) -> Ticker:
    """Map one sheet row ("Tickers", "Current Value", ...) to a Ticker."""
    symbol = str(row["Tickers"] or "").strip().upper()
    if not symbol:
        raise ValueError("empty symbol")
    return Ticker(
        symbol=symbol,
        current_price=Decimal(str(row["Current Value"])),
        company_name=row.get("Company Name") or "",
        sector=row.get("Sector") or "",
        asset_type=row.get("Asset Type") or "",
        previous_close=_optional_decimal(row.get("Yesterday Close")),
        high_52=_optional_decimal(row.get("High52")),
        low_52=_optional_decimal(row.get("Low52")),
        logo=row.get("Logo") or None,
    )


class SheetTickerSource:
    """Fetches the ticker table from `<url>?action=get_tickers`."""

    def __init__(self, url: str, timeout: int = 10):
        self.url = url
        self.timeout = timeout

    def fetch(self) -> list[Ticker]:
        """Return the published tickers.

        Rows without a usable symbol or price are skipped (and logged).
        Raises TickerFetchError on transport errors or a payload without
        ``ok: true``.
        """
        if not self.url:
            raise TickerFetchError("No tickers URL configured")
        try:
            resp = requests.get(self.url, params={"action": "get_tickers"}, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise TickerFetchError(f"Failed to fetch tickers from {self.url}: {e}") from e

        if not isinstance(payload, dict) or not payload.get("ok"):
            raise TickerFetchError(f"Ticker endpoint returned an error: {payload!r:.200}")

        tickers = []
        for row in payload.get("data") or []:
            try:
                tickers.append(parse_ticker(row))
            except (KeyError, TypeError, ValueError, InvalidOperation) as e:
                logger.warning("Skipping malformed ticker row %r: %s", row, e)
        return tickers

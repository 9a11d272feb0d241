"""Quote snapshots via yfinance for stocks, ETFs and funds."""

import logging
from decimal import Decimal
from typing import Optional

import yfinance as yf

from ..core.models import Ticker

logger = logging.getLogger(__name__)

# Exchange suffixes to try if the bare symbol has no quote (NSE, BSE, Xetra)
EXCHANGE_SUFFIXES = [".NS", ".BO", ".DE", ""]

# Yahoo quoteType → asset type label used in allocations
QUOTE_TYPES = {
    "EQUITY": "Stock",
    "ETF": "ETF",
    "MUTUALFUND": "Mutual Fund",
    "CRYPTOCURRENCY": "Crypto",
    "INDEX": "Index",
}


def _dec(value) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        d = Decimal(str(value)).quantize(Decimal("0.0001"))
    except ArithmeticError:
        return None
    return d if d.is_finite() else None


class QuoteFetcher:
    """Builds Ticker records from Yahoo Finance."""

    @staticmethod
    def _try_fetch(symbol: str, yahoo_symbol: str) -> Optional[Ticker]:
        """Quote one Yahoo symbol. Returns None when it has no price."""
        try:
            t = yf.Ticker(yahoo_symbol)
            fast = t.fast_info
            price = _dec(getattr(fast, "last_price", None))
            if price is None or price <= 0:
                return None
            previous_close = _dec(getattr(fast, "previous_close", None))
            high_52 = _dec(getattr(fast, "year_high", None))
            low_52 = _dec(getattr(fast, "year_low", None))
        except Exception as e:  # yfinance raises anything from KeyError to HTTPError
            logger.debug("No quote for %s: %s", yahoo_symbol, e)
            return None

        name, sector, asset_type, logo = symbol, "", "", None
        try:
            info = t.info or {}
            name = info.get("longName") or info.get("shortName") or symbol
            sector = info.get("sector", "")
            asset_type = QUOTE_TYPES.get(info.get("quoteType", ""), "")
            logo = info.get("logo_url")
        except Exception as e:
            logger.debug("No profile for %s: %s", yahoo_symbol, e)

        return Ticker(
            symbol=symbol.upper(),
            current_price=price,
            company_name=name,
            sector=sector,
            asset_type=asset_type,
            previous_close=previous_close,
            high_52=high_52,
            low_52=low_52,
            logo=logo,
        )

    @staticmethod
    def fetch_quote(symbol: str) -> Optional[Ticker]:
        """Fetch a snapshot for one ledger symbol.

        Tries the symbol as-is, then with common exchange suffixes. The
        returned Ticker keeps the ledger symbol so it matches transactions.
        """
        candidates = [symbol]
        base = symbol.split(".")[0]
        for suffix in EXCHANGE_SUFFIXES:
            candidate = base + suffix
            if candidate not in candidates:
                candidates.append(candidate)

        for candidate in candidates:
            ticker = QuoteFetcher._try_fetch(symbol, candidate)
            if ticker is not None:
                return ticker
        logger.info("No quote found for %s", symbol)
        return None

    @staticmethod
    def fetch_batch(symbols: list[str]) -> list[Ticker]:
        """Fetch quotes for several symbols, skipping those without a quote."""
        tickers = []
        for symbol in symbols:
            ticker = QuoteFetcher.fetch_quote(symbol)
            if ticker is not None:
                tickers.append(ticker)
        return tickers

"""Refresh the stored ticker snapshot from an external source."""

import logging
from typing import Callable

from ..core.exceptions import TickerFetchError
from ..core.models import Ticker
from ..data.repositories.tickers_repo import TickersRepository

logger = logging.getLogger(__name__)


def refresh_tickers(
    fetch: Callable[[], list[Ticker]], repo: TickersRepository
) -> tuple[list[Ticker], bool]:
    """Replace the stored snapshot with freshly fetched tickers.

    A failed or empty fetch is logged and the previous snapshot stays in
    place, so analytics keep running on stale but valid quotes.

    Returns:
        (snapshot in effect, whether it was refreshed)
    """
    try:
        tickers = fetch()
    except TickerFetchError as e:
        logger.warning("Ticker refresh failed, keeping previous snapshot: %s", e)
        return repo.list_all(), False

    if not tickers:
        logger.warning("Ticker source returned no quotes, keeping previous snapshot")
        return repo.list_all(), False

    snapshot = repo.replace_snapshot(tickers)
    logger.info("Stored %d tickers", len(snapshot))
    return snapshot, True

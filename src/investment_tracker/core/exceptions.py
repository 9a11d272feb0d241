"""Custom exceptions for the investment tracker."""


class InvestmentTrackerError(Exception):
    """Base exception."""
    pass


class TransactionNotFoundError(InvestmentTrackerError):
    pass


class InvalidTransactionError(InvestmentTrackerError):
    pass


class TickerFetchError(InvestmentTrackerError):
    pass

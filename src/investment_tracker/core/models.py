"""Data models for the investment tracker."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Bucket name for holdings whose sector, asset type or broker is unknown
OTHER = "Other"


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class AllocationDimension(str, Enum):
    SECTOR = "Sector"
    COMPANY = "Company Name"
    ASSET_TYPE = "Asset Type"
    BROKER = "Broker"


class InsightCategory(str, Enum):
    BUY = "Buy"
    SELL_HOLD = "Sell/Hold"
    OBSERVE = "Observe"


@dataclass
class Transaction:
    symbol: str
    quantity: Decimal
    price: Decimal
    transaction_date: datetime
    transaction_type: TransactionType
    currency: str = "INR"
    broker: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # Offset-bearing dates become naive local time, like every other date in the ledger
        if self.transaction_date.tzinfo is not None:
            self.transaction_date = self.transaction_date.astimezone().replace(tzinfo=None)

    @property
    def total_value(self) -> Decimal:
        return self.quantity * self.price

    @property
    def key(self) -> str:
        """Normalised symbol used for every lookup."""
        return self.symbol.strip().upper()


@dataclass
class Ticker:
    """Latest quote snapshot for one instrument. Read-only for the core."""
    symbol: str
    current_price: Decimal
    company_name: str = ""
    sector: str = ""
    asset_type: str = ""
    previous_close: Optional[Decimal] = None
    high_52: Optional[Decimal] = None
    low_52: Optional[Decimal] = None
    logo: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> str:
        return self.symbol.strip().upper()


@dataclass
class Holding:
    """Open position in one instrument, derived from its transactions."""
    symbol: str
    company_name: str
    quantity: Decimal
    avg_price: Decimal
    current_price: Decimal
    invested_value: Decimal
    current_value: Decimal
    pnl: Decimal
    pnl_percentage: Decimal
    day_change: Decimal = Decimal("0")
    day_change_percentage: Decimal = Decimal("0")
    contribution_percentage: Decimal = Decimal("0")
    asset_type: str = OTHER
    sector: str = OTHER
    broker: str = OTHER
    previous_close: Optional[Decimal] = None
    high_52: Optional[Decimal] = None
    low_52: Optional[Decimal] = None
    logo: Optional[str] = None


@dataclass
class CashFlow:
    amount: float
    date: datetime


@dataclass
class PortfolioSummary:
    total_value: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    profit_amount: Decimal = Decimal("0")
    profit_percentage: Decimal = Decimal("0")
    xirr: float = 0.0
    day_change: Decimal = Decimal("0")
    day_change_percentage: Decimal = Decimal("0")
    realized_return: Decimal = Decimal("0")
    unrealized_return: Decimal = Decimal("0")


@dataclass
class AllocationItem:
    name: str
    value: Decimal
    total_cost: Decimal
    pnl: Decimal
    pnl_percentage: Decimal
    percentage: Decimal
    quantity: Decimal = Decimal("0")
    symbol: Optional[str] = None  # company dimension only
    logo: Optional[str] = None


@dataclass
class DistributionItem:
    name: str
    value: Decimal
    percentage: Decimal


@dataclass
class YearlyAnalysis:
    year: int
    investment: Decimal
    average_monthly_investment: Decimal
    percentage_increase: Decimal
    asset_distribution: list[DistributionItem] = field(default_factory=list)


@dataclass
class MonthlyAnalysis:
    month: str       # e.g. "Jan 2024"
    month_key: str   # e.g. "2024-01"
    investment: Decimal
    percentage_increase: Decimal
    asset_distribution: list[DistributionItem] = field(default_factory=list)


@dataclass
class HealthDimension:
    label: str
    score: int
    description: str
    max_score: int = 25


@dataclass
class PortfolioHealth:
    total_score: int = 0
    grade: str = "Poor"
    dimensions: list[HealthDimension] = field(default_factory=list)
    is_empty: bool = True


@dataclass
class Projection:
    total_future_value: Decimal
    total_invested: Decimal
    estimated_gains: Decimal
    multiplier: Decimal
    present_value: Decimal
    annual_return: Decimal
    years: int


@dataclass
class Insight:
    id: str
    category: InsightCategory
    title: str
    reason: str
    badge: str
    value: str
    severity: Decimal
    symbol: Optional[str] = None
    pnl_percentage: Optional[Decimal] = None


@dataclass
class WinLossStats:
    winners: int = 0
    losers: int = 0
    winners_profit: Decimal = Decimal("0")
    losers_loss: Decimal = Decimal("0")
    total: int = 0
    win_rate: Decimal = Decimal("0")

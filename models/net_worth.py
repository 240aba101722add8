from dataclasses import dataclass
from typing import Optional


@dataclass
class Asset:
    id: int
    name: str
    type: str               # 'cash' | 'savings' | 'etf' | 'stock' | 'custom'
    amount: float
    original_currency: str
    vnd_amount: float
    custom_type: Optional[str] = None
    bank: Optional[str] = None
    interest_rate: Optional[float] = None
    term_months: Optional[int] = None
    symbol: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_type(self) -> str:
        return self.custom_type or self.type


@dataclass
class Liability:
    id: int
    name: str
    type: str               # 'credit_card' | 'loan' | 'custom'
    amount: float
    original_currency: str
    vnd_amount: float
    custom_type: Optional[str] = None
    bank: Optional[str] = None
    interest_rate: Optional[float] = None
    include_credit_card: bool = False
    credit_card_id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_type(self) -> str:
        return self.custom_type or self.type


@dataclass
class NetWorthSnapshot:
    id: int
    date: str               # 'YYYY-MM-DD'
    total_assets: float
    total_liabilities: float
    net_worth: float
    created_at: str = ""


@dataclass
class RecurringIncome:
    id: int
    amount: float
    original_currency: str
    vnd_amount: float
    day_of_month: int       # 1-31
    is_enabled: bool = True
    created_at: str = ""
    updated_at: str = ""

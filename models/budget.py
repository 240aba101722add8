from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Budget:
    id: int
    enabled: bool
    monthly_amount: float
    statement_card_id: Optional[int]    # card whose statement cycle is followed
    last_updated: str = ""


@dataclass(frozen=True)
class StatementPeriod:
    start: date
    end: date               # exclusive

    def contains(self, d: date) -> bool:
        return self.start <= d < self.end

    @property
    def label(self) -> str:
        last = date.fromordinal(self.end.toordinal() - 1)
        return f"{self.start.strftime('%b')} {self.start.day} - {last.strftime('%b')} {last.day}, {last.year}"


@dataclass
class BudgetStatus:
    """Derived on every read; never persisted."""
    current_spending: float
    remaining_amount: float
    percentage_used: float
    statement_period: StatementPeriod
    status: str             # 'on_track' | 'warning' | 'exceeded'

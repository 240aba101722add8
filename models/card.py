from dataclasses import dataclass

MIN_CYCLE_DAY = 1
MAX_CYCLE_DAY = 31


@dataclass
class Card:
    id: int
    name: str
    statement_day: int      # 1-31, billing cycle anchor
    due_day: int            # 1-31
    created_at: str = ""
    updated_at: str = ""

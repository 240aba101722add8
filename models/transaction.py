from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: int
    date: str               # 'YYYY-MM-DD' or ISO timestamp
    description: str
    amount: float
    currency: str
    vnd_amount: float       # amount normalised to VND
    card_id: int
    category_id: Optional[int]
    card_name: str = ""
    category_name: str = ""
    created_at: str = ""
    updated_at: str = ""

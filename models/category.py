from dataclasses import dataclass


@dataclass
class Category:
    id: int
    name: str
    color_hex: str = "#888888"
    created_at: str = ""
    updated_at: str = ""

import re
from database.category_dao import CategoryDAO
from models.category import Category

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value or ""))


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_id(self, category_id: int) -> Category | None:
        return self._dao.get_by_id(category_id)

    def create(self, name: str, color_hex: str = "#888888") -> Category:
        name = self._clean_name(name, exclude_id=None)
        self._check_color(color_hex)
        return self._dao.create(name, color_hex)

    def update(self, category_id: int, name: str, color_hex: str) -> Category:
        name = self._clean_name(name, exclude_id=category_id)
        self._check_color(color_hex)
        return self._dao.update(category_id, name, color_hex)

    def delete(self, category_id: int):
        if self._dao.has_transactions(category_id):
            raise ValueError("Categories used by transactions cannot be deleted.")
        self._dao.delete(category_id)

    def _clean_name(self, name: str, exclude_id: int | None) -> str:
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        # Names are unique ignoring case
        for c in self._dao.get_all():
            if c.id != exclude_id and c.name.lower() == name.lower():
                raise ValueError(f"A category named '{name}' already exists.")
        return name

    @staticmethod
    def _check_color(color_hex: str):
        if not is_hex_color(color_hex):
            raise ValueError("Color must be a hex value such as #D282A6.")

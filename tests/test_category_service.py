import pytest

from utils.constants import DEFAULT_CATEGORIES


def test_defaults_are_seeded(category_service):
    names = {c.name for c in category_service.get_all()}
    assert names == {c["name"] for c in DEFAULT_CATEGORIES}


def test_create_and_update(category_service):
    cat = category_service.create(" Pets ", "#123456")
    assert cat.name == "Pets"
    assert cat.color_hex == "#123456"

    updated = category_service.update(cat.id, "Pet Care", "#654321")
    assert updated.name == "Pet Care"
    assert updated.color_hex == "#654321"


def test_names_are_unique_ignoring_case(category_service):
    with pytest.raises(ValueError, match="already exists"):
        category_service.create("groceries")


def test_empty_name_rejected(category_service):
    with pytest.raises(ValueError):
        category_service.create("   ")


def test_category_in_use_cannot_be_deleted(category_service, tx_service, card):
    cat = category_service.create("Pets")
    tx_service.create(card.id, cat.id, 200_000, "VND", "2025-04-02")
    with pytest.raises(ValueError):
        category_service.delete(cat.id)


def test_delete_unused_category(category_service):
    cat = category_service.create("Pets")
    category_service.delete(cat.id)
    assert category_service.get_by_id(cat.id) is None


@pytest.mark.parametrize("color", ["red", "#12345", "#GGGGGG", ""])
def test_invalid_color_rejected(category_service, color):
    with pytest.raises(ValueError, match="hex"):
        category_service.create("Pets", color)


def test_short_hex_color_accepted(category_service):
    assert category_service.create("Pets", "#abc").color_hex == "#abc"

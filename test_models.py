import pydantic
import pytest

from gradebook import (
    Category,
    GradedItem,
    GradingError,
    GradingScaleEntry,
    ItemFlag,
    ValidationError,
)


def test_graded_item_from_record_with_flag_columns():
    item = GradedItem.from_record(
        {
            "id": "g1",
            "category_id": "hw",
            "points_earned": 8,
            "total_points": 10,
            "late": True,
            "excused": False,
            "missing": False,
        }
    )
    assert item.points_possible == 10.0
    assert item.points_earned == 8.0
    assert item.is_late is True
    assert item.is_excused is False
    assert item.flags == frozenset({ItemFlag.LATE})


def test_graded_item_from_record_with_flags_list():
    item = GradedItem.from_record(
        {"id": 7, "points_earned": None, "points_possible": 20, "flags": ["missing", "late"]}
    )
    assert item.id == 7
    assert item.category_id is None
    assert item.is_missing is True
    assert item.is_late is True


def test_points_possible_preferred_over_total_points():
    item = GradedItem.from_record({"id": "g1", "points_possible": 5, "total_points": 10})
    assert item.points_possible == 5.0


@pytest.mark.parametrize(
    "record",
    [
        {"id": "g1", "points_earned": -2, "total_points": 10},
        {"id": "g1", "points_earned": 2, "total_points": 0},
        {"id": "g1", "points_earned": 2},
        {"id": "g1", "points_earned": "eight", "total_points": 10},
        {"id": "g1", "points_earned": 2, "total_points": 10, "flags": ["curved"]},
    ],
)
def test_graded_item_from_record_rejects_malformed_rows(record):
    with pytest.raises(ValidationError) as excinfo:
        GradedItem.from_record(record)
    assert excinfo.value.item_id == "g1"


def test_graded_item_from_record_requires_mapping():
    with pytest.raises(ValidationError):
        GradedItem.from_record(["g1", 8, 10])


def test_category_from_record():
    category = Category.from_record({"id": "c1", "name": "Homework", "weight": 20, "drop_lowest": 1})
    assert category.weight == 20.0
    assert category.drop_lowest == 1
    assert category.name == "Homework"


def test_category_from_record_defaults():
    category = Category.from_record({"id": "c1", "name": None, "weight": None, "drop_lowest": None})
    assert category.weight == 0.0
    assert category.drop_lowest == 0
    assert category.name == ""


@pytest.mark.parametrize(
    "record",
    [
        {"id": "c1", "weight": 150},
        {"id": "c1", "weight": -1},
        {"id": "c1", "weight": 20, "drop_lowest": -1},
        {"id": "c1", "weight": 20, "drop_lowest": 1.5},
        {"name": "No id", "weight": 20},
    ],
)
def test_category_from_record_rejects_malformed_rows(record):
    with pytest.raises(ValidationError):
        Category.from_record(record)


def test_scale_entry_from_record():
    entry = GradingScaleEntry.from_record({"letter": "Giỏi", "min": 80, "max": 89.99, "gpa": 3.5})
    assert entry.letter == "Giỏi"
    assert entry.gpa == 3.5


def test_scale_entry_from_record_rejects_missing_bounds():
    with pytest.raises(ValidationError) as excinfo:
        GradingScaleEntry.from_record({"letter": "A", "min": 90})
    assert excinfo.value.item_id == "A"


def test_models_are_frozen():
    item = GradedItem(id="g1", points_earned=5, points_possible=10)
    with pytest.raises(pydantic.ValidationError):
        item.points_earned = 9


def test_validation_error_taxonomy():
    assert issubclass(ValidationError, GradingError)
    assert issubclass(ValidationError, ValueError)

"""
Value types for grade aggregation.

All models are frozen. Pydantic takes care of shapes and coercion; the
domain rules (non-negative points, positive maximum, weight range) are
checked by the ``validate_*`` helpers so that every rule violation surfaces
as a gradebook ``ValidationError`` naming the offending record.
"""

import math
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

Identifier = Union[int, str]


class ItemFlag(str, Enum):
    LATE = 'late'
    EXCUSED = 'excused'
    MISSING = 'missing'


def _is_finite(value):
    return isinstance(value, (int, float)) and math.isfinite(value)


def _describe(exc):
    """First readable message out of a pydantic error."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    where = '.'.join(str(part) for part in first.get('loc', ())) or 'record'
    return f"{where}: {first.get('msg', 'invalid value')}"


class GradedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Identifier
    category_id: Optional[Identifier] = None
    points_earned: Optional[float] = Field(None, description="None means not graded yet")
    points_possible: float
    flags: FrozenSet[ItemFlag] = frozenset()

    @property
    def is_excused(self):
        return ItemFlag.EXCUSED in self.flags

    @property
    def is_missing(self):
        return ItemFlag.MISSING in self.flags

    @property
    def is_late(self):
        return ItemFlag.LATE in self.flags

    @classmethod
    def from_record(cls, record):
        """
        Build an item from a stored grade row.

        Accepts ``points_possible`` or the assignment's ``total_points``, and
        flags either as a ``flags`` list or as boolean ``late`` / ``excused`` /
        ``missing`` columns.
        """
        if not isinstance(record, dict):
            raise ValidationError('Graded item record must be a mapping.')
        item_id = record.get('id')
        possible = record.get('points_possible')
        if possible is None:
            possible = record.get('total_points')
        flags = set(record.get('flags') or ())
        for flag in ItemFlag:
            if record.get(flag.value):
                flags.add(flag.value)
        try:
            item = cls(
                id=item_id,
                category_id=record.get('category_id'),
                points_earned=record.get('points_earned'),
                points_possible=possible,
                flags=flags,
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Graded item {item_id!r} is malformed ({_describe(exc)}).", item_id=item_id
            ) from exc
        validate_item(item)
        return item


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None is reserved for the implicit uncategorized bucket.
    id: Optional[Identifier]
    name: str = ''
    weight: float = 0.0
    drop_lowest: int = 0

    @classmethod
    def from_record(cls, record):
        """Build a category from an assignment-category row."""
        if not isinstance(record, dict):
            raise ValidationError('Category record must be a mapping.')
        category_id = record.get('id')
        if category_id is None:
            raise ValidationError('Category record has no id.')
        try:
            category = cls(
                id=category_id,
                name=record.get('name') or '',
                weight=record.get('weight') if record.get('weight') is not None else 0,
                drop_lowest=record.get('drop_lowest') if record.get('drop_lowest') is not None else 0,
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Category {category_id!r} is malformed ({_describe(exc)}).", item_id=category_id
            ) from exc
        validate_category(category)
        return category


class GradingScaleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    letter: str
    min: float = Field(..., description="Inclusive lower bound, percent")
    max: float = Field(..., description="Inclusive upper bound, percent")
    gpa: Optional[float] = None

    @classmethod
    def from_record(cls, record):
        if not isinstance(record, dict):
            raise ValidationError('Grading scale entry must be a mapping.')
        letter = record.get('letter')
        try:
            return cls(
                letter=letter,
                min=record.get('min'),
                max=record.get('max'),
                gpa=record.get('gpa'),
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Grading scale entry {letter!r} is malformed ({_describe(exc)}).", item_id=letter
            ) from exc


class GradingScale(BaseModel):
    """A validated scale, entries sorted by ``min`` descending. Build it with ``load_grading_scale``."""

    model_config = ConfigDict(frozen=True)

    name: str = ''
    entries: Tuple[GradingScaleEntry, ...]
    gap_tolerance: float = 1.0


class CategoryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: Optional[Identifier]
    name: str = ''
    weight: float = 0.0
    points_earned: float = Field(0.0, description="Sum over kept items, after drop")
    points_possible: float = Field(0.0, description="Sum over kept items, after drop")
    percentage: Optional[float] = Field(None, description="None when nothing is scored yet")
    letter: Optional[str] = None
    scored_count: int = 0
    dropped_count: int = 0
    missing_count: int = 0
    excused_count: int = 0
    ungraded_count: int = 0
    dropped_item_ids: Tuple[Identifier, ...] = ()


class OverallResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: float
    letter: str
    gpa: Optional[float] = None
    total_weight: float = Field(..., description="Sum of weights of the categories that have scored work")
    category_results: Tuple[CategoryResult, ...] = ()


def validate_item(item):
    """Reject items the engine cannot score. Negative scores are never clamped."""
    if not _is_finite(item.points_possible) or item.points_possible <= 0:
        raise ValidationError(
            f"Graded item {item.id!r}: points_possible must be a positive number, got {item.points_possible!r}.",
            item_id=item.id,
        )
    if item.points_earned is not None and (not _is_finite(item.points_earned) or item.points_earned < 0):
        raise ValidationError(
            f"Graded item {item.id!r}: points_earned must be a non-negative number, got {item.points_earned!r}.",
            item_id=item.id,
        )


def validate_category(category):
    if not _is_finite(category.weight) or not (0 <= category.weight <= 100):
        raise ValidationError(
            f"Category {category.id!r}: weight must be between 0 and 100, got {category.weight!r}.",
            item_id=category.id,
        )
    if category.drop_lowest < 0:
        raise ValidationError(
            f"Category {category.id!r}: drop_lowest must not be negative, got {category.drop_lowest!r}.",
            item_id=category.id,
        )

"""
Grade aggregation: per-item -> per-category -> overall.

Everything here is a pure function of its arguments. "No grade yet" is
reported as ``None`` (a category with nothing scored, a student with no
category scored) and is never folded into a 0%.
"""

import logging
import math

from . import config
from .errors import ValidationError
from .models import (
    Category,
    CategoryResult,
    OverallResult,
    validate_category,
    validate_item,
)
from .ordering import drop_lowest
from .scales import lookup_grade

logger = logging.getLogger(__name__)

UNCATEGORIZED_NAME = 'Uncategorized'


def _score_ratio(scored):
    item, earned = scored
    # Integer ids order before string ids; within a type ids compare natively.
    return (earned / item.points_possible, isinstance(item.id, str), item.id)


def aggregate_category(items, category, scale=None):
    """
    Aggregate one category's items into a CategoryResult.

    Excused items leave both numerator and denominator. Missing items score
    0 out of their full points and can be dropped like any other low score.
    Ungraded items (no points, no flag) are skipped. ``late`` changes
    nothing here; late penalties are applied before items reach the engine.
    The ``drop_lowest`` lowest ratios are discarded, but one scored item is
    always kept. ``letter`` is only resolved when a scale is given.
    """
    validate_category(category)
    scored = []
    excused_count = missing_count = ungraded_count = 0
    for item in items:
        validate_item(item)
        if item.category_id != category.id:
            raise ValidationError(
                f"Graded item {item.id!r} belongs to category {item.category_id!r}, "
                f"not {category.id!r}.",
                item_id=item.id,
            )
        if item.is_excused:
            excused_count += 1
        elif item.is_missing:
            missing_count += 1
            scored.append((item, 0.0))
        elif item.points_earned is None:
            ungraded_count += 1
        else:
            scored.append((item, float(item.points_earned)))

    kept, dropped = drop_lowest(scored, category.drop_lowest, key=_score_ratio)
    if dropped:
        logger.debug(
            "Category %r: dropped %d of %d scored items",
            category.id, len(dropped), len(scored),
        )

    points_earned = sum(earned for _, earned in kept)
    points_possible = sum(item.points_possible for item, _ in kept)
    percentage = None
    if points_possible > 0:
        percentage = 100.0 * points_earned / points_possible

    letter = None
    if percentage is not None and scale is not None:
        letter = lookup_grade(percentage, scale).letter

    return CategoryResult(
        category_id=category.id,
        name=category.name,
        weight=category.weight,
        points_earned=points_earned,
        points_possible=points_possible,
        percentage=percentage,
        letter=letter,
        scored_count=len(scored),
        dropped_count=len(dropped),
        missing_count=missing_count,
        excused_count=excused_count,
        ungraded_count=ungraded_count,
        dropped_item_ids=tuple(item.id for item, _ in dropped),
    )


def aggregate_overall(category_results, scale):
    """
    Weighted overall grade over the categories that have scored work.

    Categories with no percentage are left out of both the weighted sum and
    the weight total, so the remaining weights are renormalized and need not
    add up to 100. Returns None when no weighted category has scored work.
    """
    results = tuple(category_results)
    for result in results:
        if not math.isfinite(result.weight) or result.weight < 0:
            raise ValidationError(
                f"Category {result.category_id!r}: weight must be a non-negative number, got {result.weight!r}.",
                item_id=result.category_id,
            )

    included = [r for r in results if r.percentage is not None]
    total_weight = sum(r.weight for r in included)
    if total_weight <= 0:
        return None

    if len(included) < len(results):
        logger.debug(
            "Renormalizing over %d of %d categories (active weight %s)",
            len(included), len(results), total_weight,
        )
    percentage = sum(r.percentage * r.weight for r in included) / total_weight
    entry = lookup_grade(percentage, scale)
    return OverallResult(
        percentage=percentage,
        letter=entry.letter,
        gpa=entry.gpa,
        total_weight=total_weight,
        category_results=results,
    )


def compute_student_grade(items, categories, scale, uncategorized_weight=None):
    """
    One student's grade for one period from raw items and category config.

    Items without a category are pooled into an implicit uncategorized
    category weighted by ``uncategorized_weight`` (GRADEBOOK_UNCATEGORIZED_WEIGHT
    when not given). Every configured category gets a result, even with no
    items. Returns None when there is no grade to report yet.
    """
    categories = list(categories)
    grouped = {}
    for category in categories:
        if category.id is None:
            raise ValidationError(f"Category {category.name!r} has no id.")
        if category.id in grouped:
            raise ValidationError(f"Category {category.id!r} is configured twice.", item_id=category.id)
        grouped[category.id] = []

    uncategorized = []
    for item in items:
        if item.category_id is None:
            uncategorized.append(item)
        elif item.category_id in grouped:
            grouped[item.category_id].append(item)
        else:
            raise ValidationError(
                f"Graded item {item.id!r} references unknown category {item.category_id!r}.",
                item_id=item.id,
            )

    configured_weight = sum(c.weight for c in categories)
    if categories and abs(configured_weight - 100) > 1e-6:
        logger.warning(
            "Category weights sum to %s, not 100; weights are renormalized over active categories",
            configured_weight,
        )

    results = [aggregate_category(grouped[c.id], c, scale) for c in categories]
    if uncategorized:
        weight = config.UNCATEGORIZED_WEIGHT if uncategorized_weight is None else uncategorized_weight
        bucket = Category(id=None, name=UNCATEGORIZED_NAME, weight=weight, drop_lowest=0)
        results.append(aggregate_category(uncategorized, bucket, scale))

    overall = aggregate_overall(results, scale)
    if overall is None:
        logger.debug("No grades posted yet across %d categories", len(results))
    return overall


def required_percentage(current_percentage, current_weight, target_percentage, remaining_weight):
    """
    Average percentage needed on the remaining weight to finish at the target.

    None when nothing remains or the target is out of reach (above 100);
    0.0 when the target is already secured.
    """
    for label, value in (('current_weight', current_weight), ('remaining_weight', remaining_weight)):
        if not math.isfinite(value) or value < 0:
            raise ValidationError(f"{label} must be a non-negative number, got {value!r}.")
    if current_percentage is not None and not math.isfinite(current_percentage):
        raise ValidationError(f"current_percentage must be a finite number, got {current_percentage!r}.")
    if target_percentage is None or not math.isfinite(target_percentage):
        raise ValidationError(f"target_percentage must be a finite number, got {target_percentage!r}.")
    if remaining_weight <= 0:
        return None
    if current_percentage is None:
        current_percentage, current_weight = 0.0, 0.0
    total_weight = current_weight + remaining_weight
    needed = (target_percentage * total_weight - current_percentage * current_weight) / remaining_weight
    if needed > 100:
        return None
    if needed < 0:
        return 0.0
    return needed

"""
Grading scales: validation on load, percentage lookup, and preset scales.

Scales are always expressed in percent, whatever the point scale of the
underlying assignments. A score equal to a band's ``min`` belongs to that
band, never the one below.
"""

import logging
import math

from . import config
from .errors import ScaleLookupError, ValidationError
from .models import GradingScale, GradingScaleEntry

logger = logging.getLogger(__name__)

# Float slack for boundary comparisons (e.g. 90.0 - 89.99).
EPSILON = 1e-9


def _sorted_desc(entries):
    return sorted(entries, key=lambda e: (e.min, e.max), reverse=True)


def _entries_and_tolerance(scale, gap_tolerance):
    if isinstance(scale, GradingScale):
        entries = scale.entries
        tolerance = scale.gap_tolerance
    else:
        entries = _sorted_desc(scale or ())
        tolerance = config.SCALE_GAP_TOLERANCE
    if gap_tolerance is not None:
        tolerance = gap_tolerance
    return entries, tolerance


def lookup_grade(percentage, scale, gap_tolerance=None):
    """
    Return the scale entry for ``percentage`` (0-100).

    The highest band whose ``min`` the score reaches is the candidate. It
    matches when the score is within its ``max``, or when the score falls in
    the rounding gap between that band and the next higher one (e.g. 89.995
    between ``80-89.99`` and ``90-100``) and the gap is no wider than the
    tolerance. Anything else is a ScaleLookupError; no default letter is
    ever guessed.
    """
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)) or not math.isfinite(percentage):
        raise ScaleLookupError(f"Cannot look up a grade for {percentage!r}.", percentage=percentage)
    if percentage < -EPSILON or percentage > 100 + EPSILON:
        raise ScaleLookupError(
            f"Percentage {percentage!r} is outside 0-100.", percentage=percentage
        )
    entries, tolerance = _entries_and_tolerance(scale, gap_tolerance)
    if not entries:
        raise ScaleLookupError('Grading scale has no entries.', percentage=percentage)

    higher = None
    for entry in entries:
        if percentage >= entry.min - EPSILON:
            if percentage <= entry.max + EPSILON:
                return entry
            if (
                higher is not None
                and percentage < higher.min
                and higher.min - entry.max <= tolerance + EPSILON
            ):
                return entry
            raise ScaleLookupError(
                f"Percentage {percentage!r} falls outside band {entry.letter!r} "
                f"({entry.min}-{entry.max}) and no band covers it.",
                percentage=percentage,
            )
        higher = entry
    raise ScaleLookupError(
        f"Percentage {percentage!r} is below the lowest band of the grading scale.",
        percentage=percentage,
    )


def _check_entry(entry):
    letter = (entry.letter or '').strip()
    if not letter:
        raise ValidationError('Grading scale entry has an empty letter.')
    for label, value in (('min', entry.min), ('max', entry.max)):
        if not math.isfinite(value) or not (0 <= value <= 100):
            raise ValidationError(
                f"Grading scale entry {letter!r}: {label} must be between 0 and 100, got {value!r}.",
                item_id=letter,
            )
    if entry.min > entry.max:
        raise ValidationError(
            f"Grading scale entry {letter!r}: min {entry.min} is above max {entry.max}.",
            item_id=letter,
        )
    if entry.gpa is not None and (not math.isfinite(entry.gpa) or entry.gpa < 0):
        raise ValidationError(
            f"Grading scale entry {letter!r}: gpa must be a non-negative number, got {entry.gpa!r}.",
            item_id=letter,
        )


def load_grading_scale(entries, name='', gap_tolerance=None):
    """
    Validate scale entries (models or stored ``{letter, min, max, gpa}`` rows)
    and return a GradingScale sorted by ``min`` descending.

    Rejects overlapping bands, gaps wider than the tolerance, duplicate
    letters, and scales that do not reach down to 0 and up to 100. Bands may
    touch: a shared boundary value resolves to the higher band.
    """
    tolerance = config.SCALE_GAP_TOLERANCE if gap_tolerance is None else float(gap_tolerance)
    parsed = [
        e if isinstance(e, GradingScaleEntry) else GradingScaleEntry.from_record(e)
        for e in (entries or ())
    ]
    if not parsed:
        raise ValidationError(f"Grading scale {name!r} has no entries.")

    seen = set()
    for entry in parsed:
        _check_entry(entry)
        key = entry.letter.strip()
        if key in seen:
            raise ValidationError(f"Grading scale {name!r} repeats letter {key!r}.", item_id=key)
        seen.add(key)

    ordered = _sorted_desc(parsed)
    for higher, lower in zip(ordered, ordered[1:]):
        if lower.max > higher.min + EPSILON:
            raise ValidationError(
                f"Grading scale {name!r}: bands {lower.letter!r} and {higher.letter!r} overlap.",
                item_id=lower.letter,
            )
        if higher.min - lower.max > tolerance + EPSILON:
            raise ValidationError(
                f"Grading scale {name!r}: gap between {lower.letter!r} (max {lower.max}) "
                f"and {higher.letter!r} (min {higher.min}) leaves scores uncovered.",
                item_id=lower.letter,
            )
    if ordered[-1].min > EPSILON:
        raise ValidationError(
            f"Grading scale {name!r} does not cover 0% (lowest min is {ordered[-1].min}).",
            item_id=ordered[-1].letter,
        )
    if ordered[0].max < 100 - EPSILON:
        raise ValidationError(
            f"Grading scale {name!r} does not cover 100% (highest max is {ordered[0].max}).",
            item_id=ordered[0].letter,
        )
    logger.debug("Loaded grading scale %r with %d bands", name, len(ordered))
    return GradingScale(name=name, entries=tuple(ordered), gap_tolerance=tolerance)


STANDARD_SCALE = load_grading_scale(
    [
        {'letter': 'A+', 'min': 97, 'max': 100, 'gpa': 4.0},
        {'letter': 'A', 'min': 93, 'max': 96.99, 'gpa': 4.0},
        {'letter': 'A-', 'min': 90, 'max': 92.99, 'gpa': 3.7},
        {'letter': 'B+', 'min': 87, 'max': 89.99, 'gpa': 3.3},
        {'letter': 'B', 'min': 83, 'max': 86.99, 'gpa': 3.0},
        {'letter': 'B-', 'min': 80, 'max': 82.99, 'gpa': 2.7},
        {'letter': 'C+', 'min': 77, 'max': 79.99, 'gpa': 2.3},
        {'letter': 'C', 'min': 73, 'max': 76.99, 'gpa': 2.0},
        {'letter': 'C-', 'min': 70, 'max': 72.99, 'gpa': 1.7},
        {'letter': 'D+', 'min': 67, 'max': 69.99, 'gpa': 1.3},
        {'letter': 'D', 'min': 63, 'max': 66.99, 'gpa': 1.0},
        {'letter': 'D-', 'min': 60, 'max': 62.99, 'gpa': 0.7},
        {'letter': 'F', 'min': 0, 'max': 59.99, 'gpa': 0.0},
    ],
    name='Standard Letter Scale',
    gap_tolerance=1.0,
)

# Ministry 10-point scale, in percent.
VIETNAMESE_SCALE = load_grading_scale(
    [
        {'letter': 'XS', 'min': 95, 'max': 100, 'gpa': 4.0},
        {'letter': 'G', 'min': 85, 'max': 94, 'gpa': 3.7},
        {'letter': 'K', 'min': 70, 'max': 84, 'gpa': 3.0},
        {'letter': 'TB', 'min': 50, 'max': 69, 'gpa': 2.0},
        {'letter': 'Y', 'min': 0, 'max': 49, 'gpa': 1.0},
    ],
    name='Vietnamese Education Scale',
    gap_tolerance=1.0,
)

PRESET_SCALES = {
    'standard': STANDARD_SCALE,
    'vietnamese': VIETNAMESE_SCALE,
}


def get_preset_scale(name):
    key = (name or '').strip().lower()
    if key not in PRESET_SCALES:
        raise ValidationError(
            f"Unknown grading scale preset {name!r}. Choose one of: {', '.join(sorted(PRESET_SCALES))}."
        )
    return PRESET_SCALES[key]


def default_scale():
    """Preset selected by GRADEBOOK_DEFAULT_SCALE."""
    return get_preset_scale(config.DEFAULT_SCALE_NAME)

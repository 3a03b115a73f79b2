"""
Gradebook - grade aggregation for the school management system.

Turns raw per-assignment scores into category percentages, a weighted
overall percentage and a letter grade / GPA point, under weighted
categories, drop-lowest policies, custom grading scales and the
missing / excused / late score states.
"""

from .engine import aggregate_category, aggregate_overall, compute_student_grade, required_percentage
from .errors import GradingError, ScaleLookupError, ValidationError
from .gpa import ACADEMIC_STANDINGS, academic_standing, cumulative_gpa, gpa_trend, term_gpa
from .models import (
    Category,
    CategoryResult,
    GradedItem,
    GradingScale,
    GradingScaleEntry,
    ItemFlag,
    OverallResult,
)
from .ordering import drop_lowest
from .ranking import rank_students
from .scales import (
    STANDARD_SCALE,
    VIETNAMESE_SCALE,
    default_scale,
    get_preset_scale,
    load_grading_scale,
    lookup_grade,
)

__version__ = '1.0.0'

__all__ = [
    'ACADEMIC_STANDINGS',
    'Category',
    'CategoryResult',
    'GradedItem',
    'GradingError',
    'GradingScale',
    'GradingScaleEntry',
    'ItemFlag',
    'OverallResult',
    'STANDARD_SCALE',
    'ScaleLookupError',
    'VIETNAMESE_SCALE',
    'ValidationError',
    'academic_standing',
    'aggregate_category',
    'aggregate_overall',
    'compute_student_grade',
    'cumulative_gpa',
    'default_scale',
    'drop_lowest',
    'get_preset_scale',
    'gpa_trend',
    'load_grading_scale',
    'lookup_grade',
    'rank_students',
    'required_percentage',
    'term_gpa',
]

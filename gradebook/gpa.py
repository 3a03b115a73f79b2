"""Credit-weighted GPA across subjects and terms."""

import math

from .errors import ValidationError

# 0.3 points on the 10-point scale, expressed on the 4-point GPA scale.
TREND_THRESHOLD = 0.12

# Bands of the 10-point academic standing, with thresholds as percentages
# (9.0 -> 90, 6.5 -> 65 ...). Highest band first.
ACADEMIC_STANDINGS = (
    {'code': 'excellent', 'label_vi': 'Xuất sắc', 'label_en': 'Excellent', 'min_percentage': 90.0},
    {'code': 'good', 'label_vi': 'Giỏi', 'label_en': 'Good', 'min_percentage': 80.0},
    {'code': 'fair', 'label_vi': 'Khá', 'label_en': 'Fair', 'min_percentage': 65.0},
    {'code': 'average', 'label_vi': 'Trung bình', 'label_en': 'Average', 'min_percentage': 50.0},
    {'code': 'weak', 'label_vi': 'Yếu', 'label_en': 'Weak', 'min_percentage': 35.0},
    {'code': 'failing', 'label_vi': 'Kém', 'label_en': 'Failing', 'min_percentage': 0.0},
)


def academic_standing(percentage):
    """Standing band for an average percentage (0-100)."""
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)) \
            or not math.isfinite(percentage) or percentage < 0:
        raise ValidationError(f"Average percentage must be a non-negative number, got {percentage!r}.")
    for standing in ACADEMIC_STANDINGS:
        if percentage >= standing['min_percentage']:
            return standing
    return ACADEMIC_STANDINGS[-1]


def term_gpa(subject_results):
    """
    GPA for one term from ``(credits, OverallResult or None)`` pairs.

    Subjects with no grade yet, or graded on a scale without GPA points, are
    skipped. Returns None when no subject contributes. The credit-weighted
    average percentage of the contributing subjects gives the standing.
    """
    total_credits = 0.0
    weighted = 0.0
    weighted_percentage = 0.0
    subject_count = 0
    for credits, result in subject_results:
        if isinstance(credits, bool) or not isinstance(credits, (int, float)) \
                or not math.isfinite(credits) or credits <= 0:
            raise ValidationError(f"Subject credits must be a positive number, got {credits!r}.")
        if result is None or result.gpa is None:
            continue
        total_credits += credits
        weighted += result.gpa * credits
        weighted_percentage += result.percentage * credits
        subject_count += 1
    if subject_count == 0:
        return None
    average = round(weighted_percentage / total_credits, 2)
    return {
        'gpa': round(weighted / total_credits, 2),
        'average_percentage': average,
        'standing': academic_standing(average),
        'total_credits': total_credits,
        'subject_count': subject_count,
    }


def gpa_trend(gpas):
    """'improving', 'declining' or 'stable' over the last three terms."""
    recent = list(gpas)[-3:]
    if len(recent) < 2:
        return 'stable'
    difference = recent[-1] - recent[0]
    if difference > TREND_THRESHOLD:
        return 'improving'
    if difference < -TREND_THRESHOLD:
        return 'declining'
    return 'stable'


def cumulative_gpa(terms):
    """Combine ``term_gpa`` summaries, oldest first; None entries are skipped."""
    summaries = [t for t in terms if t]
    if not summaries:
        return None
    total_credits = sum(t['total_credits'] for t in summaries)
    if total_credits <= 0:
        return None
    weighted = sum(t['gpa'] * t['total_credits'] for t in summaries)
    average = round(sum(t['average_percentage'] * t['total_credits'] for t in summaries) / total_credits, 2)
    return {
        'gpa': round(weighted / total_credits, 2),
        'average_percentage': average,
        'standing': academic_standing(average),
        'total_credits': total_credits,
        'term_count': len(summaries),
        'trend': gpa_trend(t['gpa'] for t in summaries),
    }

import pytest

from gradebook import (
    STANDARD_SCALE,
    Category,
    GradedItem,
    OverallResult,
    ValidationError,
    academic_standing,
    compute_student_grade,
    cumulative_gpa,
    gpa_trend,
    term_gpa,
)


def overall(gpa, percentage=90.0):
    return OverallResult(percentage=percentage, letter="X", gpa=gpa, total_weight=100)


def term(gpa, average_percentage, total_credits=10):
    return {
        "gpa": gpa,
        "average_percentage": average_percentage,
        "total_credits": total_credits,
        "subject_count": 4,
    }


def test_term_gpa_is_credit_weighted():
    summary = term_gpa([(3, overall(4.0, 95.0)), (2, overall(3.0, 85.0)), (1, None), (4, overall(None))])
    assert summary["gpa"] == pytest.approx(3.6)
    assert summary["average_percentage"] == pytest.approx(91.0)
    assert summary["standing"]["code"] == "excellent"
    assert summary["total_credits"] == 5
    assert summary["subject_count"] == 2


def test_term_gpa_without_grades_is_none():
    assert term_gpa([(3, None), (2, None)]) is None
    assert term_gpa([]) is None


@pytest.mark.parametrize("credits", [0, -1, True, "3"])
def test_term_gpa_rejects_bad_credits(credits):
    with pytest.raises(ValidationError):
        term_gpa([(credits, overall(3.0))])


def test_cumulative_gpa():
    terms = [term(3.0, 78.0), None, term(3.5, 84.0)]
    summary = cumulative_gpa(terms)
    assert summary["gpa"] == pytest.approx(3.25)
    assert summary["average_percentage"] == pytest.approx(81.0)
    assert summary["standing"]["code"] == "good"
    assert summary["total_credits"] == 20
    assert summary["term_count"] == 2
    assert summary["trend"] == "improving"


def test_cumulative_gpa_without_terms_is_none():
    assert cumulative_gpa([]) is None
    assert cumulative_gpa([None]) is None


def test_gpa_trend():
    assert gpa_trend([3.5]) == "stable"
    assert gpa_trend([3.5, 3.0]) == "declining"
    assert gpa_trend([2.0, 2.5]) == "improving"
    # Only the last three terms count.
    assert gpa_trend([2.0, 3.0, 3.05, 3.1]) == "stable"


def test_gpa_trend_threshold_on_four_point_scale():
    assert gpa_trend([3.0, 3.1]) == "stable"
    assert gpa_trend([3.0, 3.15]) == "improving"
    assert gpa_trend([3.0, 2.85]) == "declining"


@pytest.mark.parametrize(
    "percentage, code",
    [
        (100, "excellent"),
        (90, "excellent"),
        (89.99, "good"),
        (80, "good"),
        (79.99, "fair"),
        (65, "fair"),
        (64.99, "average"),
        (50, "average"),
        (49.99, "weak"),
        (35, "weak"),
        (34.99, "failing"),
        (0, "failing"),
    ],
)
def test_academic_standing_bands(percentage, code):
    assert academic_standing(percentage)["code"] == code


def test_academic_standing_labels():
    standing = academic_standing(72.5)
    assert standing["label_vi"] == "Khá"
    assert standing["label_en"] == "Fair"


@pytest.mark.parametrize("percentage", [-1, float("nan"), None, True])
def test_academic_standing_rejects_bad_percentages(percentage):
    with pytest.raises(ValidationError):
        academic_standing(percentage)


def test_term_gpa_from_computed_subjects():
    math_categories = [Category(id="tests", weight=100)]
    math_items = [GradedItem(id="t1", category_id="tests", points_earned=95, points_possible=100)]
    art_categories = [Category(id="projects", weight=100)]
    art_items = [GradedItem(id="p1", category_id="projects", points_earned=81, points_possible=100)]
    history_categories = [Category(id="essays", weight=100)]

    subjects = [
        (4, compute_student_grade(math_items, math_categories, STANDARD_SCALE)),
        (2, compute_student_grade(art_items, art_categories, STANDARD_SCALE)),
        (3, compute_student_grade([], history_categories, STANDARD_SCALE)),
    ]
    summary = term_gpa(subjects)
    # A (4.0) over 4 credits, B- (2.7) over 2 credits; history not graded yet.
    assert summary["gpa"] == pytest.approx(round((16.0 + 5.4) / 6, 2))
    assert summary["average_percentage"] == pytest.approx(round((95 * 4 + 81 * 2) / 6, 2))
    assert summary["standing"]["code"] == "excellent"
    assert summary["subject_count"] == 2

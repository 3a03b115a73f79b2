"""Class positions from overall results."""


def rank_students(overall_by_student):
    """
    Class positions by overall percentage.

    Values may be OverallResult objects or plain percentages. Students with
    no grade yet (None) are not ranked. Equal scores share a position and a
    percentile; the next distinct score takes its own 1-based index.
    """
    def same_score(a, b):
        return abs(float(a) - float(b)) <= 1e-9

    graded = []
    for student_id, result in (overall_by_student or {}).items():
        score = getattr(result, 'percentage', result)
        if score is None:
            continue
        graded.append((student_id, float(score)))

    graded.sort(key=lambda pair: (-pair[1], str(pair[0])))
    size = len(graded)
    positions = {}
    prev_score = None
    current_pos = 0
    for index, (student_id, score) in enumerate(graded, 1):
        if prev_score is None or not same_score(score, prev_score):
            current_pos = index
        positions[student_id] = {
            'pos': current_pos,
            'size': size,
            'percentile': round(100 * (size - current_pos + 1) / size),
        }
        prev_score = score
    return positions

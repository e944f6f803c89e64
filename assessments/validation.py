"""
Question validation. Returns every problem found so a teacher can fix them in one go.
"""
from assessments.models import Question

MIN_POINTS = 1
MAX_POINTS = 100
MIN_OPTIONS = 2


def validate_question(text, question_type, points, options):
    """
    options: list of dicts with 'text' and 'is_correct'.
    Returns a list of error strings; empty when the question is valid.
    """
    errors = []
    if not (text or '').strip():
        errors.append('question text is required')

    if question_type not in Question.Type.values:
        errors.append(f"question type must be one of: {', '.join(Question.Type.values)}")

    try:
        points_ok = MIN_POINTS <= int(points) <= MAX_POINTS
    except (TypeError, ValueError):
        points_ok = False
    if not points_ok:
        errors.append(f'points must be between {MIN_POINTS} and {MAX_POINTS}')

    options = options or []
    if len(options) < MIN_OPTIONS:
        errors.append(f'at least {MIN_OPTIONS} answer options are required')
    if any(not (o.get('text') or '').strip() for o in options):
        errors.append('every answer option needs text')

    correct = sum(1 for o in options if o.get('is_correct'))
    if question_type == Question.Type.SINGLE and correct != 1:
        errors.append('single choice requires exactly one correct answer')
    elif question_type == Question.Type.MULTIPLE and correct < 1:
        errors.append('multiple choice requires at least one correct answer')
    return errors

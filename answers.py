from dataclasses import asdict, dataclass
from typing import Any

from errors import ValidationError

REQUIRED_FIELDS = ('question', 'options', 'correctAnswer', 'userAnswer')


@dataclass(frozen=True)
class AnswerCheckResult:
    question: Any
    userAnswer: str
    correctAnswer: str
    isCorrect: bool
    message: str

    def to_dict(self):
        return asdict(self)


def _normalize(answer):
    return answer.strip().lower()


def check_answer(payload):
    """Compare ``userAnswer`` against ``correctAnswer`` ignoring case and surrounding whitespace."""
    missing = [field for field in REQUIRED_FIELDS if payload.get(field) in (None, '')]
    if missing:
        raise ValidationError('Missing required fields: ' + ', '.join(missing))

    user_answer = payload['userAnswer']
    correct_answer = payload['correctAnswer']
    if not isinstance(user_answer, str) or not isinstance(correct_answer, str):
        raise ValidationError('userAnswer and correctAnswer must be strings')

    is_correct = _normalize(user_answer) == _normalize(correct_answer)
    return AnswerCheckResult(
        question=payload['question'],
        userAnswer=user_answer,
        correctAnswer=correct_answer,
        isCorrect=is_correct,
        message='Correct answer!' if is_correct else 'Incorrect answer.',
    )

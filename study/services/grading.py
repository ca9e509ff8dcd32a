"""
Quiz grading.

Answers are compared to the stored correct answer after lowercasing and
trimming both sides. Grading is exact-match only, including for short
and long answer questions: there is no partial credit.
"""

import logging
import math
from typing import List, Sequence

from study.models import ANONYMOUS_USER, Quiz, QuizAttempt


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def percentage(score: int, total_questions: int) -> int:
    """Whole-number percentage, 0 when there are no questions."""
    if not total_questions:
        return 0
    return round_half_up(score / total_questions * 100)


def _normalize(answer) -> str:
    if answer is None:
        return ""
    return str(answer).strip().lower()


def grade_answers(questions: Sequence[dict], answers: Sequence) -> List[dict]:
    """
    Grade answers index by index against the questions.

    Missing answers count as empty strings; answers beyond the last
    question are ignored.

    Returns:
        One {questionIndex, answer, isCorrect} dict per question.
    """
    graded = []
    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else ""
        answer = "" if answer is None else str(answer)
        graded.append({
            "questionIndex": index,
            "answer": answer,
            "isCorrect": _normalize(answer) == _normalize(question.get("correctAnswer")),
        })
    return graded


def grade(quiz: Quiz, answers: Sequence, user_id: str = ANONYMOUS_USER) -> QuizAttempt:
    """
    Grade a submission and build the (unsaved) QuizAttempt.

    Args:
        quiz: The quiz being answered.
        answers: Submitted answers, aligned with quiz.questions.
        user_id: Who submitted the attempt.

    Returns:
        A QuizAttempt ready to be saved.
    """
    questions = quiz.questions or []
    graded = grade_answers(questions, list(answers or []))
    score = sum(1 for item in graded if item["isCorrect"])

    logger.info(f"Graded quiz {quiz.pk}: {score}/{len(questions)}")
    return QuizAttempt(
        quiz=quiz,
        user_id=user_id or ANONYMOUS_USER,
        answers=graded,
        score=score,
        total_questions=len(questions),
    )

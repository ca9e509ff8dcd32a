"""
Progress analytics over a student's quiz attempts.
"""

import logging
from typing import Iterable

from study.services.grading import percentage, round_half_up


logger = logging.getLogger(__name__)

RECENT_ATTEMPTS = 5
STRENGTH_THRESHOLD = 70
WEAKNESS_THRESHOLD = 50


def summarize_progress(attempts: Iterable) -> dict:
    """
    Summarize quiz attempts.

    Args:
        attempts: QuizAttempt objects, newest first, with quiz and
            quiz.document loaded.

    Returns:
        Dictionary with totalAttempts, averageScore, recentAttempts
        (attempt objects), strengths, weaknesses and per-document stats
        keyed by document name.
    """
    attempts = list(attempts)

    total_score = sum(attempt.score for attempt in attempts)
    total_questions = sum(attempt.total_questions for attempt in attempts)

    document_stats = {}
    for attempt in attempts:
        quiz = attempt.quiz
        if quiz is None or quiz.document is None:
            continue
        stats = document_stats.setdefault(
            quiz.document.original_name,
            {"attempts": 0, "totalScore": 0, "totalQuestions": 0},
        )
        stats["attempts"] += 1
        stats["totalScore"] += attempt.score
        stats["totalQuestions"] += attempt.total_questions

    strengths = []
    weaknesses = []
    for name, stats in document_stats.items():
        if stats["totalQuestions"]:
            ratio = stats["totalScore"] / stats["totalQuestions"] * 100
        else:
            ratio = 0
        if ratio >= STRENGTH_THRESHOLD:
            strengths.append({"topic": name, "percentage": round_half_up(ratio)})
        elif ratio < WEAKNESS_THRESHOLD:
            weaknesses.append({"topic": name, "percentage": round_half_up(ratio)})

    logger.debug(f"Progress summary over {len(attempts)} attempts")
    return {
        "totalAttempts": len(attempts),
        "averageScore": percentage(total_score, total_questions),
        "recentAttempts": attempts[:RECENT_ATTEMPTS],
        "strengths": strengths,
        "weaknesses": weaknesses,
        "pdfStats": document_stats,
    }

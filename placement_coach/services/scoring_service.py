import logging
import math
from typing import Dict, List, Optional, Any

from placement_coach.models.scoring import CategoryStats, ScoreReport, WrongQuestion

DEFAULT_CATEGORY = "General"
NOT_ANSWERED = "Not answered"
UNKNOWN_ANSWER = "Unknown"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3, not 2)"""
    return int(math.floor(value + 0.5))


def exact_percentage(correct: float, total: float) -> float:
    """Unrounded percentage; an empty total yields 0"""
    if not total:
        return 0.0
    return correct / total * 100


def percentage_of(correct: float, total: float) -> int:
    """Rounded percentage; an empty total yields 0"""
    if not total:
        return 0
    return round_half_up(correct / total * 100)


def _correct_option(question: Any) -> Optional[Any]:
    for option in question.options:
        if option.is_correct:
            return option
    return None


def evaluate_answers(answers: Optional[Dict[str, str]], questions: List[Any]) -> ScoreReport:
    """
    Score a submission against the answer key.

    ``answers`` maps question id to the chosen option *text*; a question is
    correct only when it has a correct option and the texts are equal.
    ``questions`` are Question rows (or anything with id, text, category and
    options carrying text / is_correct).
    """
    answers = answers or {}
    breakdown: Dict[str, CategoryStats] = {}
    wrong_questions: List[WrongQuestion] = []
    total_correct = 0

    for question in questions:
        category = question.category or DEFAULT_CATEGORY
        user_answer = answers.get(str(question.id))
        correct_option = _correct_option(question)
        is_correct = correct_option is not None and user_answer == correct_option.text

        if is_correct:
            total_correct += 1
        else:
            wrong_questions.append(
                WrongQuestion(
                    id=str(question.id),
                    text=question.text,
                    category=category,
                    user_answer=user_answer or NOT_ANSWERED,
                    correct_answer=correct_option.text if correct_option is not None else UNKNOWN_ANSWER,
                )
            )

        stats = breakdown.setdefault(category, CategoryStats())
        stats.total += 1
        if is_correct:
            stats.correct += 1

    for stats in breakdown.values():
        stats.percentage = percentage_of(stats.correct, stats.total)

    logging.info(
        f"Scored {total_correct}/{len(questions)} across {len(breakdown)} categories"
    )

    return ScoreReport(
        total_correct=total_correct,
        total_questions=len(questions),
        category_breakdown=breakdown,
        wrong_questions=wrong_questions,
    )

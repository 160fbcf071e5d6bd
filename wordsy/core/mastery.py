# wordsy/core/mastery.py
"""
Mastery classification.

A word's status is a sliding-window function of its most recent quiz
results. It is NOT monotonic: a mastered word that starts being missed
again drops back to learning or new.
"""
import logging
from typing import Sequence, Union

from wordsy.core.records import WordQuizResult, WordStatus
from wordsy.core.store import ProgressStore

logger = logging.getLogger(__name__)

RECENT_WINDOW = 5
MASTERED_RATE = 0.8
MASTERED_MIN_RESULTS = 3
LEARNING_RATE = 0.5
LEARNING_MIN_RESULTS = 2

ResultLike = Union[WordQuizResult, bool]


def _is_correct(result: ResultLike) -> bool:
    if isinstance(result, bool):
        return result
    return bool(result.is_correct)


def classify(results: Sequence[ResultLike]) -> WordStatus:
    """Map a result history (oldest first) to a WordStatus"""
    if not results:
        return WordStatus.NEW

    recent = list(results)[-RECENT_WINDOW:]
    rate = sum(1 for result in recent if _is_correct(result)) / len(recent)
    total = len(results)

    if rate >= MASTERED_RATE and total >= MASTERED_MIN_RESULTS:
        return WordStatus.MASTERED
    if rate >= LEARNING_RATE or total >= LEARNING_MIN_RESULTS:
        return WordStatus.LEARNING
    return WordStatus.NEW


def success_rate(results: Sequence[ResultLike]) -> float:
    """Share of correct answers over the whole history"""
    if not results:
        return 0.0
    return sum(1 for result in results if _is_correct(result)) / len(results)


def refresh_status(store: ProgressStore, word_id: int) -> WordStatus:
    """Recompute a word's status from its log and write it only when it changed"""
    status = classify(store.get_quiz_results(word_id))
    cached = store.get_word_status(word_id)

    if status != cached:
        store.set_word_status(word_id, status)
        logger.debug(f"Word {word_id} status {cached.value} -> {status.value}")

    return status

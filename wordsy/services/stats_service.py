# wordsy/services/stats_service.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wordsy.core.mastery import classify, success_rate
from wordsy.core.progress import ProgressAggregator
from wordsy.core.records import DailyProgress, WordStatus
from wordsy.core.store import ProgressStore
from wordsy.models import Word
from wordsy.services.progress_store import SqlProgressStore, make_aggregator

logger = logging.getLogger(__name__)

# Range name -> number of day records, today included
HISTORY_RANGES = {
    "hours": 1,
    "day": 7,
    "week": 28,
}


@dataclass
class LearningStatistics:
    total_words: int
    new_words: int
    learning_words: int
    mastered_words: int
    total_quizzes: int
    correct_answers: int
    incorrect_answers: int
    success_rate: float
    today: DailyProgress
    history: List[DailyProgress] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_words": self.total_words,
            "new_words": self.new_words,
            "learning_words": self.learning_words,
            "mastered_words": self.mastered_words,
            "total_quizzes": self.total_quizzes,
            "correct_answers": self.correct_answers,
            "incorrect_answers": self.incorrect_answers,
            "success_rate": round(self.success_rate, 3),
            "today": self.today.to_dict(),
            "history": [record.to_dict() for record in self.history]
        }


def count_words_by_status(db: Session) -> Dict[WordStatus, int]:
    counts = {status: 0 for status in WordStatus}
    rows = db.query(Word.status, func.count(Word.id)).group_by(Word.status).all()
    for status, count in rows:
        counts[WordStatus.parse(status)] += count
    return counts


def get_statistics(db: Session, store: Optional[ProgressStore] = None,
                   aggregator: Optional[ProgressAggregator] = None) -> LearningStatistics:
    """Word counts per status, ledger totals and the overall success rate"""
    aggregator = aggregator or make_aggregator(db)
    store = store or aggregator.store

    counts = count_words_by_status(db)
    totals = aggregator.totals()
    results = store.list_quiz_results()

    return LearningStatistics(
        total_words=sum(counts.values()),
        new_words=counts[WordStatus.NEW],
        learning_words=counts[WordStatus.LEARNING],
        mastered_words=counts[WordStatus.MASTERED],
        total_quizzes=totals.quizzes_taken,
        correct_answers=totals.correct_answers,
        incorrect_answers=totals.incorrect_answers,
        success_rate=success_rate(results),
        today=aggregator.today(),
        history=aggregator.history()
    )


def get_history(db: Session, range_name: str = "day", aggregator: Optional[ProgressAggregator] = None) -> Dict:
    """Day records inside a named time range"""
    if range_name not in HISTORY_RANGES:
        return {
            "success": False,
            "message": f"Invalid range. Must be one of: {list(HISTORY_RANGES)}"
        }

    aggregator = aggregator or make_aggregator(db)
    records = aggregator.recent(HISTORY_RANGES[range_name])

    return {
        "success": True,
        "message": "History retrieved successfully",
        "records": records
    }


def get_word_progress(db: Session, word_id: int, store: Optional[ProgressStore] = None) -> Dict:
    """Result count, success rate and status of one word"""
    word = db.query(Word).filter(Word.id == word_id).first()
    if not word:
        return {"success": False, "message": "Word not found"}

    store = store or SqlProgressStore(db)
    results = store.get_quiz_results(word_id)

    return {
        "success": True,
        "message": "Word progress retrieved successfully",
        "word_id": word.id,
        "total_results": len(results),
        "correct_results": sum(1 for result in results if result.is_correct),
        "success_rate": success_rate(results),
        "status": store.get_word_status(word_id),
        "computed_status": classify(results)
    }

# wordsy/services/progress_store.py
from datetime import date, datetime
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from wordsy.config import settings
from wordsy.core.progress import ProgressAggregator
from wordsy.core.records import DailyProgress, WordQuizResult, WordStatus
from wordsy.core.store import ProgressStore
from wordsy.models import Word, QuizResult, DailyProgressRecord

logger = logging.getLogger(__name__)


def _to_result(row: QuizResult) -> WordQuizResult:
    return WordQuizResult(word_id=row.word_id, is_correct=row.is_correct, timestamp=row.answered_at)


def _to_progress(row: DailyProgressRecord) -> DailyProgress:
    return DailyProgress(
        day=row.day,
        words_learned=row.words_learned or 0,
        words_reviewed=row.words_reviewed or 0,
        quizzes_taken=row.quizzes_taken or 0,
        correct_answers=row.correct_answers or 0,
        incorrect_answers=row.incorrect_answers or 0,
    )


class SqlProgressStore(ProgressStore):
    """ProgressStore over the request's SQLAlchemy session; writes flush, callers commit"""

    def __init__(self, db: Session):
        self.db = db

    # WORD STATUS

    def get_word_status(self, word_id: int) -> WordStatus:
        status = self.db.query(Word.status).filter(Word.id == word_id).scalar()
        return WordStatus.parse(status)

    def set_word_status(self, word_id: int, status: WordStatus) -> None:
        updated = self.db.query(Word).filter(Word.id == word_id).update(
            {Word.status: status.value}, synchronize_session="fetch"
        )
        if not updated:
            logger.warning(f"⚠️ Tried to set status of missing word {word_id}")

    # QUIZ RESULTS

    def append_quiz_result(self, word_id: int, is_correct: bool, timestamp: datetime) -> WordQuizResult:
        result = WordQuizResult(word_id=word_id, is_correct=is_correct, timestamp=timestamp)

        # The word may have been deleted while its quiz was running
        if self.db.query(Word.id).filter(Word.id == word_id).first() is None:
            logger.warning(f"⚠️ Skipped quiz result for deleted word {word_id}")
            return result

        self.db.add(QuizResult(word_id=word_id, is_correct=is_correct, answered_at=timestamp))
        self.db.flush()
        return result

    def get_quiz_results(self, word_id: int) -> List[WordQuizResult]:
        rows = self.db.query(QuizResult).filter(
            QuizResult.word_id == word_id
        ).order_by(QuizResult.answered_at.asc(), QuizResult.id.asc()).all()
        return [_to_result(row) for row in rows]

    def list_quiz_results(self) -> List[WordQuizResult]:
        rows = self.db.query(QuizResult).order_by(
            QuizResult.answered_at.asc(), QuizResult.id.asc()
        ).all()
        return [_to_result(row) for row in rows]

    # DAILY PROGRESS

    def get_daily_progress(self, day: date) -> Optional[DailyProgress]:
        row = self.db.query(DailyProgressRecord).filter(DailyProgressRecord.day == day).first()
        return _to_progress(row) if row else None

    def put_daily_progress(self, day: date, record: DailyProgress) -> None:
        row = self.db.query(DailyProgressRecord).filter(DailyProgressRecord.day == day).first()
        if not row:
            row = DailyProgressRecord(day=day)
            self.db.add(row)

        row.words_learned = record.words_learned
        row.words_reviewed = record.words_reviewed
        row.quizzes_taken = record.quizzes_taken
        row.correct_answers = record.correct_answers
        row.incorrect_answers = record.incorrect_answers
        self.db.flush()

    def list_daily_progress(self) -> List[DailyProgress]:
        rows = self.db.query(DailyProgressRecord).order_by(DailyProgressRecord.day.asc()).all()
        return [_to_progress(row) for row in rows]

    # TRANSACTION

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


def make_aggregator(db: Session) -> ProgressAggregator:
    """Ledger over the request's database session in the configured timezone"""
    return ProgressAggregator(SqlProgressStore(db), tz=settings.get_timezone())

# wordsy/core/store.py
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, List, Optional

from wordsy.core.records import DailyProgress, WordQuizResult, WordStatus


class ProgressStore(ABC):
    """Abstract persistence seam for word status, quiz results and the daily ledger"""

    @abstractmethod
    def get_word_status(self, word_id: int) -> WordStatus:
        """Cached status of a word, NEW when nothing was stored"""
        pass

    @abstractmethod
    def set_word_status(self, word_id: int, status: WordStatus) -> None:
        pass

    @abstractmethod
    def append_quiz_result(self, word_id: int, is_correct: bool, timestamp: datetime) -> WordQuizResult:
        pass

    @abstractmethod
    def get_quiz_results(self, word_id: int) -> List[WordQuizResult]:
        """Full result history of a word, oldest first"""
        pass

    @abstractmethod
    def list_quiz_results(self) -> List[WordQuizResult]:
        """Every logged result, oldest first"""
        pass

    @abstractmethod
    def get_daily_progress(self, day: date) -> Optional[DailyProgress]:
        pass

    @abstractmethod
    def put_daily_progress(self, day: date, record: DailyProgress) -> None:
        pass

    @abstractmethod
    def list_daily_progress(self) -> List[DailyProgress]:
        """All day records ordered by date ascending"""
        pass

    def commit(self) -> None:
        """Make every write since the last commit durable"""
        pass

    def rollback(self) -> None:
        """Discard every write since the last commit"""
        pass


class InMemoryProgressStore(ProgressStore):
    """Dictionary backed store, one instance per ledger"""

    def __init__(self):
        self._statuses: Dict[int, WordStatus] = {}
        self._results: List[WordQuizResult] = []
        self._days: Dict[date, DailyProgress] = {}
        self._committed = self._snapshot()

    def _snapshot(self):
        return dict(self._statuses), list(self._results), dict(self._days)

    def commit(self) -> None:
        self._committed = self._snapshot()

    def rollback(self) -> None:
        statuses, results, days = self._committed
        self._statuses, self._results, self._days = dict(statuses), list(results), dict(days)

    def get_word_status(self, word_id: int) -> WordStatus:
        return self._statuses.get(word_id, WordStatus.NEW)

    def set_word_status(self, word_id: int, status: WordStatus) -> None:
        self._statuses[word_id] = status

    def append_quiz_result(self, word_id: int, is_correct: bool, timestamp: datetime) -> WordQuizResult:
        result = WordQuizResult(word_id=word_id, is_correct=is_correct, timestamp=timestamp)
        self._results.append(result)
        return result

    def get_quiz_results(self, word_id: int) -> List[WordQuizResult]:
        return [result for result in self._results if result.word_id == word_id]

    def list_quiz_results(self) -> List[WordQuizResult]:
        return list(self._results)

    def get_daily_progress(self, day: date) -> Optional[DailyProgress]:
        record = self._days.get(day)
        if record is None:
            return None
        # callers always get a copy
        return DailyProgress(**vars(record))

    def put_daily_progress(self, day: date, record: DailyProgress) -> None:
        self._days[day] = DailyProgress(**vars(record))

    def list_daily_progress(self) -> List[DailyProgress]:
        return [DailyProgress(**vars(self._days[day])) for day in sorted(self._days)]


# wordsy/core/progress.py
"""
Daily progress ledger.

One record per local calendar day; every write adds to the day's counters.
Reads never create records.
"""
import logging
import threading
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, List, Optional, Union

from wordsy.core.exceptions import InvalidActivityError
from wordsy.core.records import DailyProgress
from wordsy.core.store import ProgressStore

logger = logging.getLogger(__name__)

# One reentrant lock for the whole ledger, shared by every aggregator in the
# process. Session commits hold it around record_activity.
_LEDGER_LOCK = threading.RLock()

COUNTER_FIELDS = (
    "words_learned",
    "words_reviewed",
    "quizzes_taken",
    "correct_answers",
    "incorrect_answers",
)


def day_key(moment: Union[date, datetime], tz: Optional[tzinfo] = None) -> date:
    """Resolve a moment to its local calendar day"""
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(tz)
        return moment.date()
    return moment


class ProgressAggregator:
    def __init__(
        self,
        store: ProgressStore,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
        lock=None,
    ):
        self.store = store
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(tz) if tz else datetime.now().astimezone())
        self._lock = lock or _LEDGER_LOCK

    @property
    def lock(self):
        return self._lock

    def now(self) -> datetime:
        return self._clock()

    def today_key(self) -> date:
        return day_key(self.now(), self.tz)

    def record_activity(
        self,
        words_learned: int = 0,
        words_reviewed: int = 0,
        quizzes_taken: int = 0,
        correct_answers: int = 0,
        incorrect_answers: int = 0,
        on: Optional[Union[date, datetime]] = None,
    ) -> DailyProgress:
        """Add the given counts to the day record of `on` (today by default)"""
        increments = {
            "words_learned": words_learned,
            "words_reviewed": words_reviewed,
            "quizzes_taken": quizzes_taken,
            "correct_answers": correct_answers,
            "incorrect_answers": incorrect_answers,
        }
        negative = [name for name, value in increments.items() if value < 0]
        if negative:
            raise InvalidActivityError(f"Progress increments cannot be negative: {', '.join(negative)}")

        day = day_key(on if on is not None else self.now(), self.tz)

        with self._lock:
            record = self.store.get_daily_progress(day) or DailyProgress(day=day)
            for name, value in increments.items():
                setattr(record, name, getattr(record, name) + value)
            self.store.put_daily_progress(day, record)

        logger.debug(f"Recorded activity for {record.date_string}: {increments}")
        return record

    def history(self) -> List[DailyProgress]:
        return sorted(self.store.list_daily_progress(), key=lambda record: record.day)

    def today(self) -> DailyProgress:
        day = self.today_key()
        return self.store.get_daily_progress(day) or DailyProgress(day=day)

    def recent(self, days: int) -> List[DailyProgress]:
        """Day records of the last `days` days, today included"""
        if days < 1:
            return []
        start = self.today_key() - timedelta(days=days - 1)
        return [record for record in self.history() if record.day >= start]

    def totals(self) -> DailyProgress:
        """Sum of every day record, keyed on today"""
        summary = DailyProgress(day=self.today_key())
        for record in self.store.list_daily_progress():
            for name in COUNTER_FIELDS:
                setattr(summary, name, getattr(summary, name) + getattr(record, name))
        return summary

# wordsy/core/quiz_session.py
"""
Quiz session state machine.

A session is Active while current_index < len(questions) and Complete once
every question has been answered. Only a completed session is ever written
to the progress store; an abandoned one is simply dropped.

A session has a single owner. The internal lock only serializes calls that
race on the same instance (e.g. two requests answering the same question).
"""
import logging
import threading
import uuid
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from wordsy.core.exceptions import QuizSessionError
from wordsy.core.mastery import refresh_status
from wordsy.core.progress import ProgressAggregator
from wordsy.core.records import QuizQuestion, QuizWord, WordStatus
from wordsy.core.store import ProgressStore

logger = logging.getLogger(__name__)


@contextmanager
def _committing(store: ProgressStore, aggregator: Optional[ProgressAggregator] = None):
    """Commit the block's writes together under the ledger lock, or roll them all back"""
    with aggregator.lock if aggregator is not None else nullcontext():
        try:
            yield
            store.commit()
        except Exception:
            store.rollback()
            raise


def calculate_quiz_score(correct_answers: int, total_questions: int) -> float:
    """Calculate quiz score as percentage"""
    if total_questions == 0:
        return 0.0
    return round((correct_answers / total_questions) * 100, 1)


@dataclass
class QuizReport:
    session_id: str
    correct_answers: int
    incorrect_answers: int
    total_questions: int
    score: float
    review_words: List[QuizWord]
    finished_at: datetime
    words_mastered: int = 0
    statuses: Dict[int, WordStatus] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "quiz_id": self.session_id,
            "correct_answers": self.correct_answers,
            "incorrect_answers": self.incorrect_answers,
            "total_questions": self.total_questions,
            "final_score": self.score,
            "review_words": [{"id": word.id, "word": word.text} for word in self.review_words],
            "words_mastered": self.words_mastered,
            "statuses": {word_id: status.value for word_id, status in self.statuses.items()},
            "finished_at": self.finished_at,
        }


class QuizSession:
    def __init__(self, questions: Optional[Sequence[QuizQuestion]] = None, session_id: Optional[str] = None):
        self.id = session_id or uuid.uuid4().hex
        self.questions: List[QuizQuestion] = []
        self.current_index = 0
        self.correct_answers = 0
        self.incorrect_answers = 0
        self.question_results: Dict[str, bool] = {}
        self.review_words: List[QuizWord] = []
        self._report: Optional[QuizReport] = None
        self._lock = threading.RLock()

        if questions is not None:
            self.start(questions)

    # ================================
    # STATE
    # ================================

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def is_complete(self) -> bool:
        return self.current_index >= self.question_count

    @property
    def is_finished(self) -> bool:
        return self._report is not None

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return self.current_index / self.question_count

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.is_complete:
            return None
        return self.questions[self.current_index]

    @property
    def report(self) -> Optional[QuizReport]:
        return self._report

    # ================================
    # TRANSITIONS
    # ================================

    def start(self, questions: Sequence[QuizQuestion]) -> None:
        """Load the question list and reset every counter"""
        if not questions:
            raise QuizSessionError("Cannot start a quiz without questions")

        with self._lock:
            self.questions = list(questions)
            self.current_index = 0
            self.correct_answers = 0
            self.incorrect_answers = 0
            self.question_results = {}
            self.review_words = []
            self._report = None

    def answer_question(self, is_correct: bool) -> QuizQuestion:
        """Record the answer to the current question and move to the next one"""
        with self._lock:
            question = self.current_question
            if question is None:
                raise QuizSessionError("Quiz is already complete")

            if is_correct:
                self.correct_answers += 1
            else:
                self.incorrect_answers += 1
                self.review_words.append(question.word)

            self.question_results[question.id] = bool(is_correct)
            self.current_index += 1
            return question

    def finish(
        self,
        store: ProgressStore,
        aggregator: ProgressAggregator,
        now: Optional[datetime] = None,
    ) -> QuizReport:
        """
        Persist a completed session exactly once.

        Appends one result per answered question, refreshes the cached status
        of every touched word and adds the session totals to today's ledger
        record. All writes are committed together and rolled back on failure,
        so a retry after an error still writes once. Later calls return the
        same report without writing anything.
        """
        with self._lock:
            if self._report is not None:
                return self._report

            if not self.is_complete:
                raise QuizSessionError("Cannot finish a quiz before every question is answered")

            now = now or aggregator.now()
            with _committing(store, aggregator):
                touched, statuses, words_mastered = self._write_results(store, aggregator, now)

            self._report = QuizReport(
                session_id=self.id,
                correct_answers=self.correct_answers,
                incorrect_answers=self.incorrect_answers,
                total_questions=self.question_count,
                score=calculate_quiz_score(self.correct_answers, self.question_count),
                review_words=list(self.review_words),
                finished_at=now,
                words_mastered=words_mastered,
                statuses=statuses,
            )
            logger.info(
                f"✅ Quiz {self.id} finished: {self.correct_answers}/{self.question_count} correct, "
                f"{len(touched)} words updated"
            )
            return self._report

    def _write_results(self, store: ProgressStore, aggregator: ProgressAggregator, now: datetime):
        questions_by_id = {question.id: question for question in self.questions}

        touched: List[int] = []
        for question_id, is_correct in self.question_results.items():
            word_id = questions_by_id[question_id].word.id
            store.append_quiz_result(word_id, is_correct, now)
            if word_id not in touched:
                touched.append(word_id)

        statuses = {}
        words_mastered = 0
        for word_id in touched:
            previous = store.get_word_status(word_id)
            status = refresh_status(store, word_id)
            statuses[word_id] = status
            if status == WordStatus.MASTERED and previous != WordStatus.MASTERED:
                words_mastered += 1

        aggregator.record_activity(
            words_learned=words_mastered,
            quizzes_taken=1,
            correct_answers=self.correct_answers,
            incorrect_answers=self.incorrect_answers,
            on=now,
        )
        return touched, statuses, words_mastered

    # ================================
    # REMEDIATION
    # ================================

    def mark_reviewed(
        self,
        word: QuizWord,
        store: ProgressStore,
        aggregator: Optional[ProgressAggregator] = None,
    ) -> bool:
        """
        Take one occurrence of `word` off the review list and force its
        status to LEARNING, overriding whatever the classifier computed.
        Returns False when the word was not on the list.
        """
        with self._lock:
            index = next(
                (i for i, candidate in enumerate(self.review_words) if candidate.id == word.id),
                None,
            )
            if index is None:
                return False

            with _committing(store, aggregator):
                store.set_word_status(word.id, WordStatus.LEARNING)
                if aggregator is not None:
                    aggregator.record_activity(words_reviewed=1)

            del self.review_words[index]
            return True

    def mark_all_reviewed(
        self,
        store: ProgressStore,
        aggregator: Optional[ProgressAggregator] = None,
    ) -> int:
        """Apply mark_reviewed to every remaining review word and clear the list"""
        with self._lock:
            count = len(self.review_words)
            with _committing(store, aggregator):
                for word in self.review_words:
                    store.set_word_status(word.id, WordStatus.LEARNING)
                if aggregator is not None and count:
                    aggregator.record_activity(words_reviewed=count)

            self.review_words = []
            return count

from datetime import date, datetime, timezone

import pytest

from wordsy.core.exceptions import QuizSessionError
from wordsy.core.progress import ProgressAggregator
from wordsy.core.quiz_session import QuizSession, calculate_quiz_score
from wordsy.core.records import QuestionKind, QuizQuestion, QuizWord, WordStatus
from wordsy.core.store import InMemoryProgressStore

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class CountingStore(InMemoryProgressStore):
    def __init__(self):
        super().__init__()
        self.status_writes = 0

    def set_word_status(self, word_id, status):
        super().set_word_status(word_id, status)
        self.status_writes += 1


class FlakyStore(InMemoryProgressStore):
    """Fails the first status write, then behaves"""

    def __init__(self):
        super().__init__()
        self.failures_left = 1

    def set_word_status(self, word_id, status):
        if self.failures_left:
            self.failures_left -= 1
            raise RuntimeError("disk full")
        super().set_word_status(word_id, status)


def make_question(word):
    return QuizQuestion(
        kind=QuestionKind.MULTIPLE_CHOICE,
        word=word,
        prompt=f"What is {word.text}?",
        correct_answer=word.text,
        options=[word.text, "a", "b", "c"],
    )


@pytest.fixture
def words():
    return [QuizWord(id=i, text=f"word{i}") for i in range(1, 11)]


@pytest.fixture
def store():
    return InMemoryProgressStore()


@pytest.fixture
def aggregator(store):
    return ProgressAggregator(store, clock=lambda: NOW, tz=timezone.utc)


def test_start_requires_questions():
    with pytest.raises(QuizSessionError):
        QuizSession().start([])


def test_progress_is_monotonic_and_reaches_one(words):
    session = QuizSession([make_question(word) for word in words[:4]])
    seen = [session.progress]

    while not session.is_complete:
        session.answer_question(True)
        seen.append(session.progress)

    assert seen == sorted(seen)
    assert seen[-1] == 1.0
    assert session.current_question is None


def test_progress_of_empty_session_is_zero():
    assert QuizSession().progress == 0.0


def test_answer_after_completion_is_rejected(words):
    session = QuizSession([make_question(words[0])])
    session.answer_question(False)

    with pytest.raises(QuizSessionError):
        session.answer_question(True)
    assert session.current_index == 1


def test_review_words_count_duplicates(words):
    repeated = words[0]
    session = QuizSession([make_question(repeated), make_question(repeated), make_question(words[1])])

    session.answer_question(False)
    session.answer_question(False)
    session.answer_question(True)

    assert [word.id for word in session.review_words] == [repeated.id, repeated.id]
    assert len(session.review_words) == sum(1 for ok in session.question_results.values() if not ok)


def test_finish_requires_complete_session(words, store, aggregator):
    session = QuizSession([make_question(words[0]), make_question(words[1])])
    session.answer_question(True)

    with pytest.raises(QuizSessionError):
        session.finish(store, aggregator)
    assert store.list_quiz_results() == []


def test_ten_question_session_scenario(words, store, aggregator):
    session = QuizSession([make_question(word) for word in words])
    missed = {words[2].id, words[5].id, words[8].id}

    for question in list(session.questions):
        session.answer_question(question.word.id not in missed)

    report = session.finish(store, aggregator)

    record = store.get_daily_progress(date(2024, 5, 1))
    assert record.quizzes_taken == 1
    assert record.correct_answers == 7
    assert record.incorrect_answers == 3

    for word_id in missed:
        results = store.get_quiz_results(word_id)
        assert len(results) == 1
        assert results[0].is_correct is False

    assert report.score == 70.0
    assert report.total_questions == 10
    assert {word.id for word in report.review_words} == missed


def test_finish_twice_does_not_double_count(words, store, aggregator):
    session = QuizSession([make_question(word) for word in words[:3]])
    for _ in range(3):
        session.answer_question(True)

    first = session.finish(store, aggregator)
    before = store.get_daily_progress(date(2024, 5, 1))
    results_before = len(store.list_quiz_results())

    second = session.finish(store, aggregator)

    assert second is first
    assert store.get_daily_progress(date(2024, 5, 1)) == before
    assert len(store.list_quiz_results()) == results_before


def test_finish_updates_statuses_and_words_learned(words, store, aggregator):
    word = words[0]
    for _ in range(2):
        store.append_quiz_result(word.id, True, NOW)

    session = QuizSession([make_question(word)])
    session.answer_question(True)
    report = session.finish(store, aggregator)

    assert store.get_word_status(word.id) == WordStatus.MASTERED
    assert report.statuses[word.id] == WordStatus.MASTERED
    assert report.words_mastered == 1
    assert store.get_daily_progress(date(2024, 5, 1)).words_learned == 1


def test_mark_reviewed_removes_one_occurrence_and_forces_learning(words, store, aggregator):
    word = words[0]
    session = QuizSession([make_question(word), make_question(word)])
    session.answer_question(False)
    session.answer_question(False)
    session.finish(store, aggregator)

    assert session.mark_reviewed(word, store, aggregator) is True
    assert len(session.review_words) == 1
    assert store.get_word_status(word.id) == WordStatus.LEARNING
    assert store.get_daily_progress(date(2024, 5, 1)).words_reviewed == 1


def test_mark_reviewed_of_unknown_word_is_noop(words):
    store = CountingStore()
    session = QuizSession([make_question(words[0])])
    session.answer_question(True)

    assert session.mark_reviewed(words[1], store) is False
    assert store.status_writes == 0


def test_mark_all_reviewed_clears_list(words, store, aggregator):
    session = QuizSession([make_question(word) for word in words[:3]])
    for _ in range(3):
        session.answer_question(False)
    session.finish(store, aggregator)

    assert session.mark_all_reviewed(store, aggregator) == 3
    assert session.review_words == []
    assert all(store.get_word_status(word.id) == WordStatus.LEARNING for word in words[:3])
    assert store.get_daily_progress(date(2024, 5, 1)).words_reviewed == 3


def test_abandoned_session_leaves_no_trace(words, store):
    session = QuizSession([make_question(word) for word in words[:3]])
    session.answer_question(False)
    del session

    assert store.list_quiz_results() == []
    assert store.list_daily_progress() == []


def test_calculate_quiz_score():
    assert calculate_quiz_score(0, 0) == 0.0
    assert calculate_quiz_score(2, 3) == 66.7


def test_failed_finish_writes_nothing_and_retry_writes_once(words):
    store = FlakyStore()
    aggregator = ProgressAggregator(store, clock=lambda: NOW, tz=timezone.utc)
    session = QuizSession([make_question(word) for word in words[:3]])
    for _ in range(3):
        session.answer_question(True)

    with pytest.raises(RuntimeError):
        session.finish(store, aggregator)

    assert session.is_finished is False
    assert store.list_quiz_results() == []
    assert store.get_daily_progress(date(2024, 5, 1)) is None

    report = session.finish(store, aggregator)

    assert len(store.list_quiz_results()) == 3
    assert store.get_daily_progress(date(2024, 5, 1)).quizzes_taken == 1
    assert report.correct_answers == 3


def test_failed_review_keeps_word_on_list(words, aggregator):
    store = FlakyStore()
    session = QuizSession([make_question(words[0])])
    session.answer_question(False)
    store.failures_left = 0
    session.finish(store, aggregator)

    store.failures_left = 1
    with pytest.raises(RuntimeError):
        session.mark_reviewed(words[0], store, aggregator)

    assert [word.id for word in session.review_words] == [words[0].id]
    assert session.mark_reviewed(words[0], store, aggregator) is True
    assert store.get_word_status(words[0].id) == WordStatus.LEARNING

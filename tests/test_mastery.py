from datetime import datetime

import pytest

from wordsy.core.mastery import classify, refresh_status, success_rate
from wordsy.core.records import WordQuizResult, WordStatus
from wordsy.core.store import InMemoryProgressStore


class CountingStore(InMemoryProgressStore):
    def __init__(self):
        super().__init__()
        self.status_writes = 0

    def set_word_status(self, word_id, status):
        super().set_word_status(word_id, status)
        self.status_writes += 1


def test_empty_history_is_new():
    assert classify([]) == WordStatus.NEW


@pytest.mark.parametrize("history", [
    [True, True, True],
    [True, True, True, True],
    [False, False, False, True, True, True, True, True],
])
def test_recent_window_all_correct_is_mastered(history):
    assert classify(history) == WordStatus.MASTERED


def test_two_correct_answers_are_not_enough_for_mastery():
    assert classify([True, True]) == WordStatus.LEARNING


def test_three_wrong_then_two_right_is_learning():
    assert classify([False, False, True, True, True]) == WordStatus.LEARNING


def test_single_wrong_answer_stays_new():
    assert classify([False]) == WordStatus.NEW


def test_single_right_answer_is_learning():
    assert classify([True]) == WordStatus.LEARNING


def test_two_wrong_answers_are_learning_by_volume():
    assert classify([False, False]) == WordStatus.LEARNING


def test_mastered_word_can_regress():
    history = [True, True, True, True, True]
    assert classify(history) == WordStatus.MASTERED

    history += [False, False]
    assert classify(history) == WordStatus.LEARNING


def test_only_last_five_results_count():
    history = [False] * 10 + [True] * 4 + [False]
    # window is 4/5 correct
    assert classify(history) == WordStatus.MASTERED


def test_classify_is_deterministic():
    history = [True, False, True, False, True, True]
    first = classify(history)
    assert all(classify(history) == first for _ in range(10))
    assert history == [True, False, True, False, True, True]


def test_classify_accepts_result_records():
    now = datetime.now()
    results = [WordQuizResult(word_id=1, is_correct=True, timestamp=now) for _ in range(3)]
    assert classify(results) == WordStatus.MASTERED


def test_success_rate_covers_whole_history():
    assert success_rate([]) == 0.0
    assert success_rate([True, False, True, False]) == 0.5


def test_refresh_status_writes_only_on_change():
    store = CountingStore()
    now = datetime.now()

    store.append_quiz_result(1, False, now)
    assert refresh_status(store, 1) == WordStatus.NEW
    assert store.status_writes == 0

    store.append_quiz_result(1, True, now)
    assert refresh_status(store, 1) == WordStatus.LEARNING
    assert store.status_writes == 1

    assert refresh_status(store, 1) == WordStatus.LEARNING
    assert store.status_writes == 1

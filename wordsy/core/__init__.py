# wordsy/core/__init__.py
"""
Mastery tracking and quiz lifecycle: pure logic over a ProgressStore
"""

from wordsy.core.exceptions import (
    WordsyError,
    InvalidActivityError,
    QuizSessionError,
    ContentGenerationError,
    LanguageConflictError,
)
from wordsy.core.records import (
    WordStatus,
    QuestionKind,
    QuizWord,
    WordQuizResult,
    DailyProgress,
    MatchPair,
    QuizQuestion,
)
from wordsy.core.store import ProgressStore, InMemoryProgressStore
from wordsy.core.mastery import classify, refresh_status, success_rate
from wordsy.core.progress import ProgressAggregator, day_key
from wordsy.core.quiz_builder import build
from wordsy.core.quiz_session import QuizSession, QuizReport, calculate_quiz_score

__all__ = [
    "WordsyError",
    "InvalidActivityError",
    "QuizSessionError",
    "ContentGenerationError",
    "LanguageConflictError",
    "WordStatus",
    "QuestionKind",
    "QuizWord",
    "WordQuizResult",
    "DailyProgress",
    "MatchPair",
    "QuizQuestion",
    "ProgressStore",
    "InMemoryProgressStore",
    "classify",
    "refresh_status",
    "success_rate",
    "ProgressAggregator",
    "day_key",
    "build",
    "QuizSession",
    "QuizReport",
    "calculate_quiz_score",
]

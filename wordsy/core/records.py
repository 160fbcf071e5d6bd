# wordsy/core/records.py
"""
Plain records shared by the mastery, progress and quiz components.

These carry no persistence state so they can be handed across requests,
threads and stores freely.
"""
import enum
import uuid
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import List, Optional


class WordStatus(str, enum.Enum):
    NEW = "new"
    LEARNING = "learning"
    MASTERED = "mastered"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Optional[str]) -> "WordStatus":
        """Unknown or missing tags read as NEW"""
        try:
            return cls(value)
        except ValueError:
            return cls.NEW


class QuestionKind(str, enum.Enum):
    MULTIPLE_CHOICE = "multipleChoice"
    FILL_IN_BLANK = "fillInBlank"
    DRAG_AND_DROP = "dragAndDrop"
    AUDIO = "audio"

    @property
    def is_choice(self) -> bool:
        return self in (QuestionKind.MULTIPLE_CHOICE, QuestionKind.FILL_IN_BLANK)


@dataclass(frozen=True)
class QuizWord:
    """Detached view of a word as seen by the quiz engine"""
    id: int
    text: str
    language: Optional[str] = None


@dataclass
class WordQuizResult:
    word_id: int
    is_correct: bool
    timestamp: datetime


@dataclass
class DailyProgress:
    day: date
    words_learned: int = 0
    words_reviewed: int = 0
    quizzes_taken: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0

    @property
    def date_string(self) -> str:
        return self.day.strftime("%Y-%m-%d")

    @property
    def total_answers(self) -> int:
        return self.correct_answers + self.incorrect_answers

    @property
    def success_rate(self) -> float:
        if self.total_answers == 0:
            return 0.0
        return self.correct_answers / self.total_answers

    def to_dict(self) -> dict:
        data = asdict(self)
        data["day"] = self.date_string
        data["success_rate"] = round(self.success_rate, 3)
        return data


@dataclass(frozen=True)
class MatchPair:
    term: str
    definition: str


@dataclass
class QuizQuestion:
    kind: QuestionKind
    word: QuizWord
    prompt: str
    correct_answer: str
    options: List[str] = field(default_factory=list)
    sentence: Optional[str] = None
    blank_position: Optional[int] = None
    match_pairs: List[MatchPair] = field(default_factory=list)
    terms: List[str] = field(default_factory=list)
    definitions: List[str] = field(default_factory=list)
    audio_text: Optional[str] = None
    question_emojis: str = "🤔📚📝"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self, reveal_answer: bool = False) -> dict:
        data = {
            "id": self.id,
            "type": self.kind.value,
            "question": self.prompt,
            "word_id": self.word.id,
            "options": list(self.options),
            "sentence": self.sentence,
            "blank_position": self.blank_position,
            "terms": list(self.terms),
            "definitions": list(self.definitions),
            "audio_text": self.audio_text,
            "question_emojis": self.question_emojis,
        }
        if reveal_answer:
            data["correct_answer"] = self.correct_answer
            data["match_pairs"] = [
                {"term": pair.term, "definition": pair.definition}
                for pair in self.match_pairs
            ]
        return data

# wordsy/core/quiz_builder.py
"""
Turns raw generated question payloads into QuizQuestion records.

Generated content is unreliable, so building is a filter: malformed entries
are dropped and never raised. A quiz may end up shorter than requested.
"""
import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from wordsy.core.records import MatchPair, QuestionKind, QuizQuestion, QuizWord

logger = logging.getLogger(__name__)

CHOICE_OPTION_COUNT = 4

_KIND_TAGS = {
    "multiplechoice": QuestionKind.MULTIPLE_CHOICE,
    "fillinblank": QuestionKind.FILL_IN_BLANK,
    "fillintheblank": QuestionKind.FILL_IN_BLANK,
    "draganddrop": QuestionKind.DRAG_AND_DROP,
    "audio": QuestionKind.AUDIO,
}


class RawQuizQuestion(BaseModel):
    """One entry of the generator's `questions` list"""
    type: str
    question: str
    correct_answer: str = Field(alias="correctAnswer")
    options: List[str] = Field(default_factory=list)
    sentence: Optional[str] = None
    match_pairs: Optional[List[Dict[str, Any]]] = Field(default=None, alias="matchPairs")
    audio_text: Optional[str] = Field(default=None, alias="audioText")
    question_emojis: Optional[str] = Field(default=None, alias="questionEmojis")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore"
    }


def resolve_kind(tag: Optional[str]) -> QuestionKind:
    """Map a generator type tag to a QuestionKind, defaulting to multiple choice"""
    if not tag:
        return QuestionKind.MULTIPLE_CHOICE
    key = tag.lower().replace("_", "").replace("-", "").replace(" ", "")
    return _KIND_TAGS.get(key, QuestionKind.MULTIPLE_CHOICE)


def find_word(raw: RawQuizQuestion, candidate_words: Sequence[QuizWord]) -> Optional[QuizWord]:
    """Owning word of a question, falling back to the first candidate"""
    answer = raw.correct_answer.lower()
    prompt = raw.question.lower()

    for word in candidate_words:
        text = word.text.lower()
        if not text:
            continue
        if text in answer or text in prompt:
            return word

    return candidate_words[0] if candidate_words else None


def _match_pairs(raw: RawQuizQuestion) -> List[MatchPair]:
    pairs = []
    for item in raw.match_pairs or []:
        term = item.get("term")
        definition = item.get("definition")
        if isinstance(term, str) and isinstance(definition, str) and term and definition:
            pairs.append(MatchPair(term=term, definition=definition))
    return pairs


def build_question(
    entry: Any,
    candidate_words: Sequence[QuizWord],
    rng: Optional[random.Random] = None,
) -> Optional[QuizQuestion]:
    """Build one question, or None when the entry is unusable"""
    if not isinstance(entry, dict):
        return None

    try:
        raw = RawQuizQuestion.model_validate(entry)
    except ValidationError as e:
        logger.debug(f"Dropping malformed question payload: {e.error_count()} errors")
        return None

    word = find_word(raw, candidate_words)
    if word is None:
        return None

    kind = resolve_kind(raw.type)
    rng = rng or random

    if kind.is_choice:
        if len(raw.options) != CHOICE_OPTION_COUNT or raw.correct_answer not in raw.options:
            logger.debug(f"Dropping {kind.value} question with bad options: {raw.question!r}")
            return None

    pairs: List[MatchPair] = []
    terms: List[str] = []
    definitions: List[str] = []
    if kind == QuestionKind.DRAG_AND_DROP:
        pairs = _match_pairs(raw)
        if not pairs:
            logger.debug(f"Dropping drag and drop question without pairs: {raw.question!r}")
            return None
        # Two independent permutations so position never gives a pairing away
        terms = rng.sample([pair.term for pair in pairs], len(pairs))
        definitions = rng.sample([pair.definition for pair in pairs], len(pairs))

    blank_position = None
    if kind == QuestionKind.FILL_IN_BLANK and raw.sentence:
        index = raw.sentence.find("_")
        blank_position = index if index >= 0 else 0

    question = QuizQuestion(
        kind=kind,
        word=word,
        prompt=raw.question,
        correct_answer=raw.correct_answer,
        options=list(raw.options),
        sentence=raw.sentence,
        blank_position=blank_position,
        match_pairs=pairs,
        terms=terms,
        definitions=definitions,
        audio_text=raw.audio_text,
    )
    if raw.question_emojis:
        question.question_emojis = raw.question_emojis
    return question


def build(
    raw_questions: Iterable[Any],
    candidate_words: Sequence[QuizWord],
    rng: Optional[random.Random] = None,
) -> List[QuizQuestion]:
    """Validated questions in input order; malformed entries are skipped"""
    candidate_words = list(candidate_words)
    questions = []
    dropped = 0

    for entry in raw_questions or []:
        question = build_question(entry, candidate_words, rng)
        if question is None:
            dropped += 1
            continue
        questions.append(question)

    if dropped:
        logger.info(f"⚠️ Dropped {dropped} unusable generated questions, kept {len(questions)}")
    return questions

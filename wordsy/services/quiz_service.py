# wordsy/services/quiz_service.py
import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from wordsy.config import settings
from wordsy.core.exceptions import ContentGenerationError, QuizSessionError
from wordsy.core.progress import ProgressAggregator
from wordsy.core.quiz_builder import build
from wordsy.core.quiz_session import QuizSession
from wordsy.core.records import QuizWord
from wordsy.models import Group
from wordsy.services.content_service import QUIZ_TYPES
from wordsy.services.progress_store import make_aggregator
from wordsy.services.word_service import to_quiz_word

logger = logging.getLogger(__name__)


@dataclass
class ActiveQuiz:
    session: QuizSession
    group_id: int
    quiz_type: str
    words: Dict[int, QuizWord]
    created_at: datetime


# In-process registry of running quizzes, keyed by session id
active_quizzes: Dict[str, ActiveQuiz] = {}
_registry_lock = threading.Lock()


def _is_expired(quiz: ActiveQuiz, now: datetime) -> bool:
    return now - quiz.created_at > timedelta(minutes=settings.quiz_session_timeout_minutes)


def purge_expired_quizzes(now: Optional[datetime] = None) -> int:
    """Drop every quiz older than the session timeout"""
    now = now or datetime.now()
    with _registry_lock:
        expired = [session_id for session_id, quiz in active_quizzes.items() if _is_expired(quiz, now)]
        for session_id in expired:
            del active_quizzes[session_id]

    if expired:
        logger.info(f"🧹 Dropped {len(expired)} expired quiz sessions")
    return len(expired)


def get_active_quiz(session_id: str) -> Optional[ActiveQuiz]:
    with _registry_lock:
        quiz = active_quizzes.get(session_id)
        if quiz is None:
            return None
        if _is_expired(quiz, datetime.now()):
            del active_quizzes[session_id]
            logger.info(f"⌛ Quiz session {session_id} expired")
            return None
        return quiz


def _register(quiz: ActiveQuiz):
    purge_expired_quizzes()
    with _registry_lock:
        active_quizzes[quiz.session.id] = quiz


def quiz_state(quiz: ActiveQuiz) -> Dict:
    """Client view of a running quiz; answers stay hidden"""
    session = quiz.session
    current = session.current_question
    return {
        "quiz_id": session.id,
        "group_id": quiz.group_id,
        "quiz_type": quiz.quiz_type,
        "total_questions": session.question_count,
        "current_index": session.current_index,
        "correct_answers": session.correct_answers,
        "incorrect_answers": session.incorrect_answers,
        "progress": round(session.progress, 3),
        "is_complete": session.is_complete,
        "is_finished": session.is_finished,
        "current_question": current.to_dict() if current else None,
        "review_words": [{"id": word.id, "word": word.text} for word in session.review_words]
    }


# ================================
# QUIZ LIFECYCLE
# ================================

def start_quiz(db: Session, group_id: int, quiz_type: str = "standard", generator=None,
               rng: Optional[random.Random] = None) -> Dict:
    """Generate a quiz for a group and register it as an active session"""
    if quiz_type not in QUIZ_TYPES:
        return {"success": False, "message": f"Invalid quiz type. Must be one of: {QUIZ_TYPES}"}

    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        return {"success": False, "message": "Group not found"}

    words = list(group.words)
    if len(words) < settings.quiz_min_words:
        return {
            "success": False,
            "message": f"At least {settings.quiz_min_words} words are needed to start a quiz"
        }

    rng = rng or random.Random()
    selected = rng.sample(words, min(settings.quiz_max_words, len(words)))
    language = group.language or settings.default_language

    payload = [
        {
            "word": word.text,
            "type": word.word_type,
            "translation": word.translation or "",
            "meaning": word.note or ""
        }
        for word in selected
    ]

    try:
        raw_questions = generator.generate_quiz_questions(
            payload,
            quiz_type=quiz_type,
            language=language,
            group_name=group.name,
            group_description=group.description or "",
            question_count=settings.quiz_max_words
        )
    except ContentGenerationError as e:
        logger.error(f"❌ Quiz generation failed for group {group_id}: {str(e)}")
        return {"success": False, "message": str(e)}
    except Exception as e:
        logger.error(f"❌ Unexpected quiz generation error for group {group_id}: {str(e)}")
        return {"success": False, "message": f"Error generating quiz: {str(e)}"}

    candidates = [to_quiz_word(word) for word in selected]
    questions = build(raw_questions, candidates, rng)
    if not questions:
        return {"success": False, "message": "No usable questions were generated"}

    for question in questions:
        if question.kind.is_choice:
            rng.shuffle(question.options)

    session = QuizSession(questions)
    quiz = ActiveQuiz(
        session=session,
        group_id=group.id,
        quiz_type=quiz_type,
        words={word.id: word for word in candidates},
        created_at=datetime.now()
    )
    _register(quiz)

    logger.info(f"🎯 Started quiz {session.id} for group '{group.name}' with {len(questions)} questions")
    return {
        "success": True,
        "message": "Quiz started successfully",
        "quiz": quiz
    }


def get_quiz(session_id: str) -> Dict:
    quiz = get_active_quiz(session_id)
    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}
    return {"success": True, "message": "Quiz retrieved successfully", "quiz": quiz}


def submit_answer(session_id: str, is_correct: Optional[bool] = None, answer: Optional[str] = None) -> Dict:
    """Answer the current question with a verdict or an answer string"""
    quiz = get_active_quiz(session_id)
    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}

    session = quiz.session
    current = session.current_question
    if current is None:
        return {"success": False, "message": "Quiz is already complete"}

    if is_correct is None:
        if answer is None:
            return {"success": False, "message": "Either is_correct or answer is required"}
        is_correct = answer.strip().casefold() == current.correct_answer.strip().casefold()

    try:
        question = session.answer_question(is_correct)
    except QuizSessionError as e:
        return {"success": False, "message": str(e)}

    return {
        "success": True,
        "message": "Correct!" if is_correct else "Incorrect",
        "is_correct": bool(is_correct),
        "correct_answer": question.correct_answer,
        "quiz": quiz
    }


def finish_quiz(db: Session, session_id: str, aggregator: Optional[ProgressAggregator] = None) -> Dict:
    """Persist a completed quiz; repeated calls return the same report"""
    quiz = get_active_quiz(session_id)
    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}

    aggregator = aggregator or make_aggregator(db)

    try:
        report = quiz.session.finish(aggregator.store, aggregator)
    except QuizSessionError as e:
        return {"success": False, "message": str(e)}
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error finishing quiz {session_id}: {str(e)}")
        return {"success": False, "message": f"Error finishing quiz: {str(e)}"}

    return {
        "success": True,
        "message": "Quiz completed successfully",
        "report": report
    }


def mark_word_reviewed(db: Session, session_id: str, word_id: int,
                       aggregator: Optional[ProgressAggregator] = None) -> Dict:
    """Take one missed word off the review list and set it to learning"""
    quiz = get_active_quiz(session_id)
    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}

    word = quiz.words.get(word_id)
    if word is None:
        return {"success": False, "message": "Word is not part of this quiz"}

    aggregator = aggregator or make_aggregator(db)

    try:
        removed = quiz.session.mark_reviewed(word, aggregator.store, aggregator)
    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error marking word as reviewed: {str(e)}"}

    if not removed:
        return {"success": False, "message": "Word is not on the review list"}

    return {
        "success": True,
        "message": "Word marked as reviewed",
        "remaining": len(quiz.session.review_words)
    }


def mark_all_reviewed(db: Session, session_id: str, aggregator: Optional[ProgressAggregator] = None) -> Dict:
    quiz = get_active_quiz(session_id)
    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}

    aggregator = aggregator or make_aggregator(db)

    try:
        count = quiz.session.mark_all_reviewed(aggregator.store, aggregator)
    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error marking words as reviewed: {str(e)}"}

    return {
        "success": True,
        "message": f"{count} words marked as reviewed",
        "reviewed": count
    }


def abandon_quiz(session_id: str) -> Dict:
    """Drop a quiz without writing anything"""
    with _registry_lock:
        quiz = active_quizzes.pop(session_id, None)

    if not quiz:
        return {"success": False, "message": "Quiz session not found or expired"}

    logger.info(f"🚪 Quiz {session_id} abandoned at question {quiz.session.current_index}")
    return {"success": True, "message": "Quiz abandoned"}


def list_active_quizzes() -> List[ActiveQuiz]:
    purge_expired_quizzes()
    with _registry_lock:
        return list(active_quizzes.values())

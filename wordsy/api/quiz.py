# wordsy/api/quiz.py - Quiz system
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional

from wordsy.database import get_db
from wordsy.services import quiz_service
from wordsy.services.content_service import ContentGenerator, get_content_generator
from wordsy.utils import StandardResponse

router = APIRouter()


# ================================
# REQUEST MODELS
# ================================

class QuizStartRequest(BaseModel):
    quiz_type: str = "standard"  # standard, vocabulary, grammar, pronunciation


class QuizAnswerRequest(BaseModel):
    is_correct: Optional[bool] = None
    answer: Optional[str] = None


def _status_for(message: str) -> int:
    return 404 if "not found" in message.lower() else 400


# ================================
# QUIZ ENDPOINTS
# ================================

@router.post("/{group_id}/start", response_model=StandardResponse)
def start_quiz(
        group_id: int,
        request: Optional[QuizStartRequest] = None,
        db: Session = Depends(get_db),
        generator: ContentGenerator = Depends(get_content_generator)
):
    """Generate a quiz for a group"""
    quiz_type = request.quiz_type if request else "standard"
    result = quiz_service.start_quiz(db, group_id, quiz_type=quiz_type, generator=generator)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=quiz_service.quiz_state(result["quiz"])
    )


@router.get("/", response_model=StandardResponse)
async def list_active_quizzes():
    quizzes = quiz_service.list_active_quizzes()

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Active quizzes retrieved successfully",
        data={"quizzes": [quiz_service.quiz_state(quiz) for quiz in quizzes]}
    )


@router.get("/{quiz_id}", response_model=StandardResponse)
async def get_quiz(quiz_id: str):
    """Current state of a running quiz"""
    result = quiz_service.get_quiz(quiz_id)

    if not result["success"]:
        raise HTTPException(status_code=404, detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=quiz_service.quiz_state(result["quiz"])
    )


@router.post("/{quiz_id}/answer", response_model=StandardResponse)
async def submit_answer(quiz_id: str, answer_data: QuizAnswerRequest):
    """Answer the current question"""
    result = quiz_service.submit_answer(quiz_id, is_correct=answer_data.is_correct, answer=answer_data.answer)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    state = quiz_service.quiz_state(result["quiz"])
    state["is_correct"] = result["is_correct"]
    state["correct_answer"] = result["correct_answer"]

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=state
    )


@router.post("/{quiz_id}/finish", response_model=StandardResponse)
async def finish_quiz(quiz_id: str, db: Session = Depends(get_db)):
    """Save a completed quiz to word progress and today's statistics"""
    result = quiz_service.finish_quiz(db, quiz_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=result["report"].to_dict()
    )


@router.post("/{quiz_id}/review/{word_id}", response_model=StandardResponse)
async def mark_word_reviewed(quiz_id: str, word_id: int, db: Session = Depends(get_db)):
    result = quiz_service.mark_word_reviewed(db, quiz_id, word_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"word_id": word_id, "remaining": result["remaining"]}
    )


@router.post("/{quiz_id}/review", response_model=StandardResponse)
async def mark_all_reviewed(quiz_id: str, db: Session = Depends(get_db)):
    result = quiz_service.mark_all_reviewed(db, quiz_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"reviewed": result["reviewed"]}
    )


@router.delete("/{quiz_id}", response_model=StandardResponse)
async def abandon_quiz(quiz_id: str):
    """Drop a quiz without saving anything"""
    result = quiz_service.abandon_quiz(quiz_id)

    if not result["success"]:
        raise HTTPException(status_code=404, detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"quiz_id": quiz_id}
    )

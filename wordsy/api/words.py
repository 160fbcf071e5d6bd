# wordsy/api/words.py - Word registry
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional

from wordsy.database import get_db
from wordsy.services import word_service, stats_service
from wordsy.services.content_service import ContentGenerator, get_content_generator
from wordsy.utils import StandardResponse, word_to_dict, sentence_to_dict

router = APIRouter()


# ================================
# REQUEST MODELS
# ================================

class WordCreate(BaseModel):
    text: str
    type: Optional[str] = None
    note: Optional[str] = None
    translation: Optional[str] = None
    group_ids: List[int] = []


class WordUpdate(BaseModel):
    text: Optional[str] = None
    type: Optional[str] = None
    note: Optional[str] = None
    translation: Optional[str] = None


class FavoriteRequest(BaseModel):
    is_favorite: bool


class StatusRequest(BaseModel):
    status: str


class WordInfoRequest(BaseModel):
    translate_language: Optional[str] = None


class SentenceRequest(BaseModel):
    count: int = 5


class TranslateRequest(BaseModel):
    target_language: Optional[str] = None


def _status_for(message: str) -> int:
    return 404 if "not found" in message.lower() else 400


# ================================
# WORD ENDPOINTS
# ================================

@router.get("/", response_model=StandardResponse)
async def list_words(
        status: Optional[str] = None,
        favorites_only: bool = False,
        group_id: Optional[int] = None,
        db: Session = Depends(get_db)
):
    """List words with optional status, favorite and group filters"""
    words = word_service.get_words(db, status=status, favorites_only=favorites_only, group_id=group_id)

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Words retrieved successfully",
        data={
            "words": [word_to_dict(word) for word in words],
            "total": len(words)
        }
    )


@router.post("/", response_model=StandardResponse, status_code=201)
async def create_word(word_data: WordCreate, db: Session = Depends(get_db)):
    """Create new word"""
    result = word_service.create_word(
        db=db,
        text=word_data.text,
        word_type=word_data.type,
        note=word_data.note,
        translation=word_data.translation,
        group_ids=word_data.group_ids
    )

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=201,
        is_success=True,
        details=result["message"],
        data=word_to_dict(result["word"])
    )


@router.get("/{word_id}", response_model=StandardResponse)
async def get_word(word_id: int, db: Session = Depends(get_db)):
    word = word_service.get_word_by_id(db, word_id)

    if not word:
        raise HTTPException(status_code=404, detail="Word not found")

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Word retrieved successfully",
        data=word_to_dict(word)
    )


@router.put("/{word_id}", response_model=StandardResponse)
async def update_word(word_id: int, word_data: WordUpdate, db: Session = Depends(get_db)):
    result = word_service.update_word(
        db=db,
        word_id=word_id,
        text=word_data.text,
        word_type=word_data.type,
        note=word_data.note,
        translation=word_data.translation
    )

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=word_to_dict(result["word"])
    )


@router.delete("/{word_id}", response_model=StandardResponse)
async def delete_word(word_id: int, db: Session = Depends(get_db)):
    result = word_service.delete_word(db, word_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"deleted_word_id": word_id}
    )


@router.post("/{word_id}/favorite", response_model=StandardResponse)
async def set_favorite(word_id: int, request: FavoriteRequest, db: Session = Depends(get_db)):
    result = word_service.set_favorite(db, word_id, request.is_favorite)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"id": word_id, "is_favorite": result["word"].is_favorite}
    )


@router.post("/{word_id}/status", response_model=StandardResponse)
async def set_status(word_id: int, request: StatusRequest, db: Session = Depends(get_db)):
    """Manually override the cached status"""
    result = word_service.set_word_status(db, word_id, request.status)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"id": word_id, "status": result["word"].status}
    )


@router.get("/{word_id}/progress", response_model=StandardResponse)
async def get_word_progress(word_id: int, db: Session = Depends(get_db)):
    result = stats_service.get_word_progress(db, word_id)

    if not result["success"]:
        raise HTTPException(status_code=404, detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={
            "word_id": result["word_id"],
            "total_results": result["total_results"],
            "correct_results": result["correct_results"],
            "success_rate": round(result["success_rate"], 3),
            "status": result["status"].value,
            "computed_status": result["computed_status"].value
        }
    )


# ================================
# GENERATED CONTENT ENDPOINTS
# ================================

@router.post("/{word_id}/info", response_model=StandardResponse)
def refresh_word_info(
        word_id: int,
        request: Optional[WordInfoRequest] = None,
        db: Session = Depends(get_db),
        generator: ContentGenerator = Depends(get_content_generator)
):
    """Fill type, meaning and translation from the content generator"""
    result = word_service.refresh_word_info(
        db, word_id, generator,
        translate_language=request.translate_language if request else None
    )

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=word_to_dict(result["word"])
    )


@router.get("/{word_id}/sentences", response_model=StandardResponse)
async def get_sentences(word_id: int, db: Session = Depends(get_db)):
    if not word_service.get_word_by_id(db, word_id):
        raise HTTPException(status_code=404, detail="Word not found")

    sentences = word_service.get_sentences(db, word_id)

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Sentences retrieved successfully",
        data={"sentences": [sentence_to_dict(sentence) for sentence in sentences]}
    )


@router.post("/{word_id}/sentences", response_model=StandardResponse)
def generate_sentences(
        word_id: int,
        request: Optional[SentenceRequest] = None,
        db: Session = Depends(get_db),
        generator: ContentGenerator = Depends(get_content_generator)
):
    """Generate example sentences, replacing the cached ones"""
    count = request.count if request else 5
    if count < 1 or count > 10:
        raise HTTPException(status_code=400, detail="Sentence count must be between 1 and 10")

    result = word_service.generate_sentences(db, word_id, generator, count=count)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"sentences": [sentence_to_dict(sentence) for sentence in result["sentences"]]}
    )


@router.post("/{word_id}/sentences/{sentence_id}/translate", response_model=StandardResponse)
def translate_sentence(
        word_id: int,
        sentence_id: int,
        request: Optional[TranslateRequest] = None,
        db: Session = Depends(get_db),
        generator: ContentGenerator = Depends(get_content_generator)
):
    """Translate a cached example sentence"""
    result = word_service.translate_sentence(
        db, word_id, sentence_id, generator,
        target_language=request.target_language if request else None
    )

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={
            "sentence": sentence_to_dict(result["sentence"]),
            "translation": result["translation"],
            "language": result["language"]
        }
    )

# wordsy/utils.py - Shared utilities and common functions
from typing import Optional
from pydantic import BaseModel


# ================================
# SHARED RESPONSE MODELS
# ================================

class StandardResponse(BaseModel):
    status_code: int
    is_success: bool
    details: str
    data: Optional[dict] = None


# ================================
# VALIDATION UTILITIES
# ================================

def validate_word_item(text: str, translation: Optional[str] = None) -> dict:
    """Simple validation for words"""
    errors = []

    if not text or len(text.strip()) < 1:
        errors.append("Word cannot be empty")
    elif len(text) > 100:
        errors.append("Word is too long (max 100 characters)")

    if translation and len(translation) > 200:
        errors.append("Translation is too long (max 200 characters)")

    return {
        "is_valid": len(errors) == 0,
        "errors": errors
    }


# ================================
# SERIALIZERS
# ================================

def group_summary(group) -> dict:
    return {
        "id": group.id,
        "name": group.name,
        "color": group.color,
        "language": group.language
    }


def word_to_dict(word) -> dict:
    return {
        "id": word.id,
        "text": word.text,
        "type": word.word_type,
        "note": word.note,
        "translation": word.translation,
        "status": word.status,
        "is_favorite": bool(word.is_favorite),
        "language": word.language,
        "groups": [group_summary(group) for group in word.groups],
        "created_at": word.created_at,
        "updated_at": word.updated_at
    }


def group_to_dict(group, include_words: bool = False) -> dict:
    data = {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "color": group.color,
        "language": group.language,
        "total_words": len(group.words),
        "created_at": group.created_at,
        "updated_at": group.updated_at
    }
    if include_words:
        data["words"] = [
            {
                "id": word.id,
                "text": word.text,
                "type": word.word_type,
                "translation": word.translation,
                "status": word.status,
                "is_favorite": bool(word.is_favorite)
            }
            for word in group.words
        ]
    return data


def sentence_to_dict(sentence) -> dict:
    return {
        "id": sentence.id,
        "text": sentence.text,
        "difficulty": sentence.difficulty,
        "created_at": sentence.created_at
    }

# wordsy/services/word_service.py
from sqlalchemy.orm import Session
from wordsy.config import settings
from wordsy.models import Word, Group, ExampleSentence, WORD_TYPES
from wordsy.core.exceptions import ContentGenerationError, LanguageConflictError
from wordsy.core.records import QuizWord, WordStatus
from wordsy.services.group_service import check_language_compatible
from wordsy.services.progress_store import SqlProgressStore
from wordsy.utils import validate_word_item
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


def normalize_word_type(word_type: Optional[str]) -> str:
    value = (word_type or "").strip().lower()
    return value if value in WORD_TYPES else "other"


def to_quiz_word(word: Word) -> QuizWord:
    """Snapshot of a word for the quiz engine"""
    return QuizWord(id=word.id, text=word.text, language=word.language)


def create_word(db: Session, text: str, word_type: str = None, note: str = None,
                translation: str = None, group_ids: List[int] = None) -> Dict:
    """Create new word, optionally linked to groups"""
    try:
        validation = validate_word_item(text, translation)
        if not validation["is_valid"]:
            return {"success": False, "message": "; ".join(validation["errors"])}

        word = Word(
            text=text.strip(),
            word_type=normalize_word_type(word_type),
            note=note.strip() if note else None,
            translation=translation.strip() if translation else None,
            status=WordStatus.NEW.value,
            is_favorite=False
        )

        for group_id in group_ids or []:
            group = db.query(Group).filter(Group.id == group_id).first()
            if not group:
                return {"success": False, "message": f"Group {group_id} not found"}
            if any(existing.id == group.id for existing in word.groups):
                continue
            check_language_compatible(word, group)
            word.groups.append(group)

        db.add(word)
        db.commit()
        db.refresh(word)

        logger.info(f"📝 Created word '{word.text}' in {len(word.groups)} groups")
        return {
            "success": True,
            "message": "Word created successfully",
            "word": word
        }

    except LanguageConflictError as e:
        db.rollback()
        return {"success": False, "message": str(e)}
    except Exception as e:
        db.rollback()
        return {
            "success": False,
            "message": f"Error creating word: {str(e)}"
        }


def get_words(db: Session, status: str = None, favorites_only: bool = False,
              group_id: int = None) -> List[Word]:
    """Get words, newest first, with optional filters"""
    query = db.query(Word)

    if status:
        query = query.filter(Word.status == WordStatus.parse(status).value)
    if favorites_only:
        query = query.filter(Word.is_favorite == True)
    if group_id is not None:
        query = query.filter(Word.groups.any(Group.id == group_id))

    return query.order_by(Word.created_at.desc(), Word.id.desc()).all()


def get_word_by_id(db: Session, word_id: int) -> Optional[Word]:
    """Get word by ID"""
    return db.query(Word).filter(Word.id == word_id).first()


def update_word(db: Session, word_id: int, text: str = None, word_type: str = None,
                note: str = None, translation: str = None) -> Dict:
    """Update word fields"""
    try:
        word = db.query(Word).filter(Word.id == word_id).first()

        if not word:
            return {"success": False, "message": "Word not found"}

        new_text = text if text is not None else word.text
        new_translation = translation if translation is not None else word.translation
        validation = validate_word_item(new_text, new_translation)
        if not validation["is_valid"]:
            return {"success": False, "message": "; ".join(validation["errors"])}

        # Update fields
        if text is not None:
            word.text = text.strip()
        if word_type is not None:
            word.word_type = normalize_word_type(word_type)
        if note is not None:
            word.note = note.strip() if note else None
        if translation is not None:
            word.translation = translation.strip() if translation else None

        db.commit()
        db.refresh(word)

        return {
            "success": True,
            "message": "Word updated successfully",
            "word": word
        }

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error updating word: {str(e)}"}


def delete_word(db: Session, word_id: int) -> Dict:
    """Delete word (cascade removes sentences, quiz results and group links)"""
    try:
        word = db.query(Word).filter(Word.id == word_id).first()

        if not word:
            return {"success": False, "message": "Word not found"}

        db.delete(word)
        db.commit()

        logger.info(f"🗑️ Deleted word {word_id}")
        return {"success": True, "message": "Word deleted successfully"}

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error deleting word: {str(e)}"}


def set_favorite(db: Session, word_id: int, is_favorite: bool) -> Dict:
    try:
        word = db.query(Word).filter(Word.id == word_id).first()

        if not word:
            return {"success": False, "message": "Word not found"}

        word.is_favorite = bool(is_favorite)
        db.commit()
        db.refresh(word)

        return {
            "success": True,
            "message": "Added to favorites" if word.is_favorite else "Removed from favorites",
            "word": word
        }

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error updating favorite: {str(e)}"}


def set_word_status(db: Session, word_id: int, status: str) -> Dict:
    """Manually override a word's cached status; the next quiz recomputes it"""
    try:
        status_value = WordStatus(status)
    except ValueError:
        return {
            "success": False,
            "message": f"Invalid status. Must be one of: {[s.value for s in WordStatus]}"
        }

    word = db.query(Word).filter(Word.id == word_id).first()
    if not word:
        return {"success": False, "message": "Word not found"}

    try:
        store = SqlProgressStore(db)
        store.set_word_status(word_id, status_value)
        store.commit()
        db.refresh(word)
        return {"success": True, "message": f"Word marked as {status_value.display_name}", "word": word}

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error updating status: {str(e)}"}


# ================================
# GENERATED CONTENT
# ================================

def refresh_word_info(db: Session, word_id: int, generator, translate_language: str = None) -> Dict:
    """Fill type, meaning and translation from the content generator"""
    word = db.query(Word).filter(Word.id == word_id).first()
    if not word:
        return {"success": False, "message": "Word not found"}

    try:
        info = generator.get_word_info(
            word.text,
            source_language=word.language or "",
            translate_language=translate_language or settings.default_translate_language
        )
    except ContentGenerationError as e:
        logger.error(f"❌ Word info failed for '{word.text}': {str(e)}")
        return {"success": False, "message": str(e)}

    try:
        word.word_type = normalize_word_type(info.get("type"))
        if info.get("meaning"):
            word.note = info["meaning"]
        if info.get("translation"):
            word.translation = info["translation"]

        db.commit()
        db.refresh(word)

        return {"success": True, "message": "Word info updated", "word": word}

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error saving word info: {str(e)}"}


def get_sentences(db: Session, word_id: int) -> List[ExampleSentence]:
    """Cached example sentences of a word"""
    return db.query(ExampleSentence).filter(
        ExampleSentence.word_id == word_id
    ).order_by(ExampleSentence.id.asc()).all()


def generate_sentences(db: Session, word_id: int, generator, count: int = 5) -> Dict:
    """Generate example sentences and replace the cached ones"""
    word = db.query(Word).filter(Word.id == word_id).first()
    if not word:
        return {"success": False, "message": "Word not found"}

    context_group = word.groups[0] if word.groups else None

    try:
        generated = generator.generate_example_sentences(
            word.text,
            group_name=context_group.name if context_group else "",
            group_description=(context_group.description or "") if context_group else "",
            language=word.language or settings.default_language,
            count=count
        )
    except ContentGenerationError as e:
        logger.error(f"❌ Sentence generation failed for '{word.text}': {str(e)}")
        return {"success": False, "message": str(e)}

    if not generated:
        return {"success": False, "message": "No sentences were generated"}

    try:
        word.sentences.clear()
        for item in generated:
            word.sentences.append(ExampleSentence(text=item["text"], difficulty=item.get("difficulty", "medium")))

        db.commit()
        db.refresh(word)

        logger.info(f"💬 Cached {len(generated)} sentences for '{word.text}'")
        return {
            "success": True,
            "message": "Sentences generated successfully",
            "sentences": get_sentences(db, word_id)
        }

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error saving sentences: {str(e)}"}


def translate_sentence(db: Session, word_id: int, sentence_id: int, generator,
                       target_language: str = None) -> Dict:
    """Translate one cached example sentence; nothing is stored"""
    sentence = db.query(ExampleSentence).filter(
        ExampleSentence.id == sentence_id,
        ExampleSentence.word_id == word_id
    ).first()
    if not sentence:
        return {"success": False, "message": "Sentence not found"}

    target = target_language or settings.default_translate_language

    try:
        translation = generator.translate(sentence.text, target)
    except ContentGenerationError as e:
        logger.error(f"❌ Translation failed for sentence {sentence_id}: {str(e)}")
        return {"success": False, "message": str(e)}

    if not translation:
        return {"success": False, "message": "No translation was generated"}

    return {
        "success": True,
        "message": "Sentence translated successfully",
        "sentence": sentence,
        "translation": translation,
        "language": target
    }

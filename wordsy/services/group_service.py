# wordsy/services/group_service.py
from sqlalchemy.orm import Session
from wordsy.models import Word, Group, GROUP_COLORS
from wordsy.core.exceptions import LanguageConflictError
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


def normalize_language(language: Optional[str]) -> Optional[str]:
    """Lower-cased language tag, None for empty values"""
    if not language or not language.strip():
        return None
    return language.strip().lower()


def check_language_compatible(word: Word, group: Group):
    """A word may only sit in language-bearing groups that share one language"""
    if not group.language:
        return

    for other in word.groups:
        if other.id == group.id or not other.language:
            continue
        if other.language != group.language:
            raise LanguageConflictError(
                f"Word '{word.text}' already belongs to a '{other.language}' group "
                f"and cannot join the '{group.language}' group '{group.name}'"
            )


def create_group(db: Session, name: str, description: str = None, color: str = None,
                 language: str = None) -> Dict:
    """Create new group"""
    try:
        group = Group(
            name=name.strip(),
            description=description.strip() if description else None,
            color=color if color in GROUP_COLORS else "blue",
            language=normalize_language(language)
        )

        db.add(group)
        db.commit()
        db.refresh(group)

        logger.info(f"📁 Created group '{group.name}' ({group.language or 'no language'})")
        return {
            "success": True,
            "message": "Group created successfully",
            "group": group
        }

    except Exception as e:
        db.rollback()
        return {
            "success": False,
            "message": f"Error creating group: {str(e)}"
        }


def get_groups(db: Session) -> List[Group]:
    """Get all groups, newest first"""
    return db.query(Group).order_by(Group.created_at.desc(), Group.id.desc()).all()


def get_group_by_id(db: Session, group_id: int) -> Optional[Group]:
    """Get group by ID"""
    return db.query(Group).filter(Group.id == group_id).first()


def update_group(db: Session, group_id: int, name: str = None, description: str = None,
                 color: str = None, language: str = None) -> Dict:
    """Update group fields; a language change must not split any member word"""
    if color is not None and color not in GROUP_COLORS:
        return {"success": False, "message": f"Invalid color. Must be one of: {GROUP_COLORS}"}

    try:
        group = db.query(Group).filter(Group.id == group_id).first()

        if not group:
            return {"success": False, "message": "Group not found"}

        if language is not None:
            new_language = normalize_language(language)
            if new_language != group.language:
                group.language = new_language
                try:
                    for word in group.words:
                        check_language_compatible(word, group)
                except LanguageConflictError as e:
                    db.rollback()
                    return {"success": False, "message": str(e)}

        if name:
            group.name = name.strip()
        if description is not None:
            group.description = description.strip() if description else None
        if color is not None:
            group.color = color

        db.commit()
        db.refresh(group)

        return {
            "success": True,
            "message": "Group updated successfully",
            "group": group
        }

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error updating group: {str(e)}"}


def delete_group(db: Session, group_id: int) -> Dict:
    """Delete group; words whose only group this was are deleted with it"""
    try:
        group = db.query(Group).filter(Group.id == group_id).first()

        if not group:
            return {"success": False, "message": "Group not found"}

        deleted_words = 0
        for word in list(group.words):
            if len(word.groups) <= 1:
                db.delete(word)
                deleted_words += 1
            else:
                word.groups.remove(group)

        db.delete(group)
        db.commit()

        logger.info(f"🗑️ Deleted group {group_id} and {deleted_words} orphaned words")
        return {
            "success": True,
            "message": "Group deleted successfully",
            "deleted_words": deleted_words
        }

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error deleting group: {str(e)}"}


def add_word_to_group(db: Session, group_id: int, word_id: int) -> Dict:
    """Add an existing word to a group"""
    try:
        group = db.query(Group).filter(Group.id == group_id).first()
        if not group:
            return {"success": False, "message": "Group not found"}

        word = db.query(Word).filter(Word.id == word_id).first()
        if not word:
            return {"success": False, "message": "Word not found"}

        if any(existing.id == group.id for existing in word.groups):
            return {"success": True, "message": "Word already in group", "group": group}

        check_language_compatible(word, group)
        word.groups.append(group)
        db.commit()
        db.refresh(group)

        return {"success": True, "message": "Word added to group", "group": group}

    except LanguageConflictError as e:
        db.rollback()
        return {"success": False, "message": str(e)}
    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error adding word to group: {str(e)}"}


def remove_word_from_group(db: Session, group_id: int, word_id: int) -> Dict:
    """Remove a word from a group, the word itself is kept"""
    try:
        word = db.query(Word).filter(Word.id == word_id).first()
        if not word:
            return {"success": False, "message": "Word not found"}

        group = next((g for g in word.groups if g.id == group_id), None)
        if not group:
            return {"success": False, "message": "Word is not in this group"}

        word.groups.remove(group)
        db.commit()

        return {"success": True, "message": "Word removed from group"}

    except Exception as e:
        db.rollback()
        return {"success": False, "message": f"Error removing word from group: {str(e)}"}

# wordsy/services/chat_service.py
from typing import Dict, List
import logging

from wordsy.config import settings
from wordsy.core.exceptions import ContentGenerationError

logger = logging.getLogger(__name__)

CHAT_ROLES = ["user", "assistant"]
MAX_HISTORY = 20


def chat_reply(messages: List[Dict[str, str]], generator, language: str = None) -> Dict:
    """Practice conversation turn; the history lives on the client"""
    if not messages:
        return {"success": False, "message": "At least one message is required"}

    history = []
    for message in messages:
        role = (message.get("role") or "").strip().lower()
        content = (message.get("content") or "").strip()
        if role not in CHAT_ROLES:
            return {"success": False, "message": f"Invalid role. Must be one of: {CHAT_ROLES}"}
        if not content:
            return {"success": False, "message": "Messages cannot be empty"}
        history.append({"role": role, "content": content})

    if history[-1]["role"] != "user":
        return {"success": False, "message": "The last message must come from the user"}

    language = language or settings.default_language

    try:
        reply = generator.chat(history[-MAX_HISTORY:], language)
    except ContentGenerationError as e:
        logger.error(f"❌ Chat reply failed: {str(e)}")
        return {"success": False, "message": str(e)}

    if not reply:
        return {"success": False, "message": "No reply was generated"}

    return {
        "success": True,
        "message": "Reply generated successfully",
        "reply": reply,
        "language": language
    }

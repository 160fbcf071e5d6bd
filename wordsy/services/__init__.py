# wordsy/services/__init__.py
"""
Import all services for easy access
"""

from wordsy.services import chat_service
from wordsy.services import content_service
from wordsy.services import group_service
from wordsy.services import progress_store
from wordsy.services import quiz_service
from wordsy.services import stats_service
from wordsy.services import word_service

# Export services
__all__ = [
    "chat_service",
    "content_service",
    "group_service",
    "progress_store",
    "quiz_service",
    "stats_service",
    "word_service"
]

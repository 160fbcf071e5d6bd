# wordsy/models/__init__.py
"""
Import all models to ensure they are registered with SQLAlchemy
"""

from wordsy.models.word import Word, Group, ExampleSentence, word_group_links, WORD_TYPES, GROUP_COLORS
from wordsy.models.progress import QuizResult, DailyProgressRecord

# Export all models
__all__ = [
    "Word",
    "Group",
    "ExampleSentence",
    "word_group_links",
    "WORD_TYPES",
    "GROUP_COLORS",
    "QuizResult",
    "DailyProgressRecord"
]

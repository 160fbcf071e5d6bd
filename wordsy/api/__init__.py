# wordsy/api/__init__.py
"""
HTTP routers
"""

from wordsy.api import chat, groups, quiz, stats, words

__all__ = ["chat", "groups", "quiz", "stats", "words"]

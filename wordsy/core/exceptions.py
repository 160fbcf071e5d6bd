# wordsy/core/exceptions.py


class WordsyError(Exception):
    """Base class for all wordsy domain errors"""
    pass


class InvalidActivityError(WordsyError, ValueError):
    """Raised when a progress increment is negative"""
    pass


class QuizSessionError(WordsyError):
    """Raised when a quiz session is driven outside its state machine"""
    pass


class ContentGenerationError(WordsyError):
    """Raised when the content generator fails or returns unusable data"""
    pass


class LanguageConflictError(WordsyError):
    """Raised when a word would end up in groups with different languages"""
    pass

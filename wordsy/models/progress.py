# wordsy/models/progress.py
from sqlalchemy import Column, Integer, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from wordsy.database import Base


class QuizResult(Base):
    """Append-only log of answers, the source of truth for word status"""
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    is_correct = Column(Boolean, nullable=False)
    answered_at = Column(DateTime(timezone=True), nullable=False)

    # RELATIONSHIPS
    word = relationship("Word", back_populates="quiz_results")


class DailyProgressRecord(Base):
    __tablename__ = "daily_progress"

    id = Column(Integer, primary_key=True, index=True)
    day = Column(Date, unique=True, index=True, nullable=False)

    # COUNTERS (additive within a day)
    words_learned = Column(Integer, default=0, nullable=False)
    words_reviewed = Column(Integer, default=0, nullable=False)
    quizzes_taken = Column(Integer, default=0, nullable=False)
    correct_answers = Column(Integer, default=0, nullable=False)
    incorrect_answers = Column(Integer, default=0, nullable=False)

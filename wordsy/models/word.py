# wordsy/models/word.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Table
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from wordsy.database import Base

WORD_TYPES = ["noun", "verb", "adjective", "adverb", "other"]
GROUP_COLORS = ["blue", "green", "red", "orange", "purple", "pink", "teal"]

# Membership is owned by Word.groups; Group.words is a read-only reverse view
word_group_links = Table(
    "word_group_links",
    Base.metadata,
    Column("word_id", Integer, ForeignKey("words.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
)


class Word(Base):
    __tablename__ = "words"

    id = Column(Integer, primary_key=True, index=True)

    # CORE DATA
    text = Column(String, nullable=False, index=True)
    word_type = Column(String, default="other")  # noun, verb, adjective, adverb, other
    note = Column(Text, nullable=True)
    translation = Column(String, nullable=True)

    # CACHED FLAGS
    status = Column(String, default="new", nullable=False)  # new, learning, mastered
    is_favorite = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # RELATIONSHIPS
    groups = relationship("Group", secondary=word_group_links, order_by="Group.created_at")
    sentences = relationship("ExampleSentence", back_populates="word", cascade="all, delete-orphan")
    quiz_results = relationship("QuizResult", back_populates="word", cascade="all, delete-orphan")

    @property
    def language(self):
        """Language of the first language-bearing group, None without one"""
        for group in self.groups:
            if group.language:
                return group.language
        return None


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    color = Column(String, default="blue")
    language = Column(String, nullable=True)  # ISO code, e.g. "en", "tr"

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # RELATIONSHIPS
    words = relationship("Word", secondary=word_group_links, viewonly=True)


class ExampleSentence(Base):
    __tablename__ = "example_sentences"

    id = Column(Integer, primary_key=True, index=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    difficulty = Column(String, default="medium")  # easy, medium, hard

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # RELATIONSHIPS
    word = relationship("Word", back_populates="sentences")

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base


def utcnow():
    return datetime.now(timezone.utc)


def new_id():
    return str(uuid.uuid4())


class Issue(Base):
    __tablename__ = "issues"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    subcategory = Column(String(50), nullable=True)
    location = Column(String(300), nullable=True)
    priority = Column(String(10), nullable=False, default="medium")  # low, medium, high
    status = Column(String(20), nullable=False, default="reported")  # reported, in-progress, resolved
    image_url = Column(String(500), nullable=True)
    user_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    suggestions = relationship("Suggestion", back_populates="issue", cascade="all, delete-orphan")


class Suggestion(Base):
    __tablename__ = "suggestions"

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    content = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    issue = relationship("Issue", back_populates="suggestions")
    liked_by = relationship("SuggestionLike", back_populates="suggestion", cascade="all, delete-orphan")


class SuggestionLike(Base):
    """One row per citizen who liked a suggestion."""

    __tablename__ = "suggestion_likes"
    __table_args__ = (UniqueConstraint("suggestion_id", "user_id", name="uq_suggestion_like"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    suggestion_id = Column(String(36), ForeignKey("suggestions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    suggestion = relationship("Suggestion", back_populates="liked_by")

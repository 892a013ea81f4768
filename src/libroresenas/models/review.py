# src/libroresenas/models/review.py
from datetime import datetime, timezone

from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        CheckConstraint, UniqueConstraint, Index)
from sqlalchemy.orm import relationship
from libroresenas.db.session import Base

REVIEW_TEXT_MAX_LENGTH = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    rating = Column(Integer, nullable=False)
    text = Column(String(REVIEW_TEXT_MAX_LENGTH), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
    # book_id y user_id no cambian tras la creación
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")

    __table_args__ = (
        # Ensure rating is between 1 and 5
        CheckConstraint('rating >= 1 AND rating <= 5', name='review_rating_check'),
        # A user can review a specific book only once; this is what rejects racing inserts
        UniqueConstraint('book_id', 'user_id', name='uq_book_user_review'),
        Index('ix_reviews_book_created', 'book_id', 'created_at'),
        Index('ix_reviews_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"

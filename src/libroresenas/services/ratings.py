"""
Ratings Service

Keeps the denormalized rating fields of a Book in sync with its reviews:
- average_rating: mean of the review ratings, rounded half-up to one decimal
- review_count: number of reviews

The aggregation itself is a pure function over a book's ratings. Reading the
ratings and writing the result go through a RatingStore, so the algorithm can
be exercised without a database. crud_review calls recompute_book_rating after
every review create, update and delete.

There is no lock around recomputation. Each call rescans the reviews and
writes both fields in one UPDATE, so two overlapping calls for the same book
end with the last writer's snapshot, and the next review mutation corrects it.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from libroresenas.core.exceptions import StorageError
from libroresenas.models.book import Book
from libroresenas.models.review import Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    """Aggregate of a book's reviews, as stored on the Book row."""

    average_rating: float
    review_count: int

    @classmethod
    def empty(cls) -> "RatingSummary":
        return cls(average_rating=0.0, review_count=0)


def round_half_up(value, places: int = 1) -> float:
    """
    Round to `places` decimals, ties away from zero.

    Python's round() uses banker's rounding on a binary float, so round(4.25, 1)
    gives 4.2. Going through Decimal gives 4.3.

    Args:
        value: int, float, str or Decimal. Floats are converted via str() so
            that 4.25 is treated as the decimal 4.25.
        places: Number of decimal places to keep.

    Returns:
        The rounded value as a float.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def summarize_ratings(ratings: Iterable[int]) -> RatingSummary:
    """
    Compute the rating aggregate for a set of review ratings.

    The mean is computed as Decimal(sum) / Decimal(count) so the rounding step
    never sees a binary approximation of a .x5 value.

    Args:
        ratings: Integer ratings (1-5) of every review of one book.

    Returns:
        RatingSummary with the rounded mean and the count, or the empty
        summary (0.0, 0) when there are no ratings.
    """
    ratings = list(ratings)
    if not ratings:
        return RatingSummary.empty()

    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingSummary(average_rating=round_half_up(mean), review_count=len(ratings))


class RatingStore(Protocol):
    """Storage capability needed by recompute_book_rating."""

    def ratings_for_book(self, book_id: int) -> List[int]:
        """Return the rating of every review of the book (full scan)."""
        ...

    def save_book_rating(self, book_id: int, summary: RatingSummary) -> bool:
        """
        Write both aggregate fields of the book in a single operation.

        Returns False if the book does not exist.
        """
        ...


class SqlAlchemyRatingStore:
    """
    RatingStore backed by the ORM session.

    save_book_rating commits its own transaction. Callers commit the review
    mutation first, so a failure here never undoes the review.
    """

    def __init__(self, db: Session):
        self.db = db

    def ratings_for_book(self, book_id: int) -> List[int]:
        stmt = select(Review.rating).where(Review.book_id == book_id)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Could not read reviews for book {book_id}") from exc

    def save_book_rating(self, book_id: int, summary: RatingSummary) -> bool:
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(
                average_rating=summary.average_rating,
                review_count=summary.review_count,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            updated = self.db.execute(stmt).rowcount
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Could not store rating for book {book_id}") from exc
        return updated > 0


def recompute_book_rating(store: RatingStore, book_id: int) -> Optional[RatingSummary]:
    """
    Recalculate and store a book's rating aggregate.

    Idempotent: with no review change in between, two calls write the same
    values. A book with no reviews gets average_rating=0, review_count=0.

    Args:
        store: Where to read ratings from and write the result to.
        book_id: ID of the book to update.

    Returns:
        The summary that was written, or None if the book does not exist
        (nothing is written in that case).

    Raises:
        StorageError: If the store cannot be read or written.
    """
    summary = summarize_ratings(store.ratings_for_book(book_id))

    if not store.save_book_rating(book_id, summary):
        logger.warning(f"Book {book_id} not found while updating its rating; skipping.")
        return None

    logger.debug(
        f"Book {book_id} rating set to {summary.average_rating} "
        f"from {summary.review_count} review(s)."
    )
    return summary


def recalculate_book_rating(db: Session, book_id: int) -> Optional[RatingSummary]:
    """Recompute one book's aggregate using the given session."""
    return recompute_book_rating(SqlAlchemyRatingStore(db), book_id)


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books.

    Repairs aggregates left stale by a failed recomputation.

    Args:
        db: Database session

    Returns:
        Number of books updated
    """
    try:
        book_ids = db.execute(select(Book.id).order_by(Book.id)).scalars().all()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Could not list books") from exc

    store = SqlAlchemyRatingStore(db)
    updated = 0
    for book_id in book_ids:
        if recompute_book_rating(store, book_id) is not None:
            updated += 1

    logger.info(f"Recalculated ratings for {updated} book(s).")
    return updated

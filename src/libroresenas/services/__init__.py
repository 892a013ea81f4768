from .ratings import (
    RatingStore,
    RatingSummary,
    SqlAlchemyRatingStore,
    recalculate_all_book_ratings,
    recalculate_book_rating,
    recompute_book_rating,
    round_half_up,
    summarize_ratings,
)

__all__ = [
    "RatingStore",
    "RatingSummary",
    "SqlAlchemyRatingStore",
    "recalculate_all_book_ratings",
    "recalculate_book_rating",
    "recompute_book_rating",
    "round_half_up",
    "summarize_ratings",
]

from .crud_user import (
    get_user_by_email,
    get_user_by_id,
    create_user,
    authenticate_user,
    get_users,
)
from .crud_book import (
    create_book,
    search_books,
    count_books,
    get_book_by_id,
    require_book,
    list_genres,
)
from .crud_review import (
    create_review,
    update_review,
    delete_review,
    get_review_by_id,
    get_user_review_for_book,
    get_reviews_for_book,
    get_reviews_for_book_with_user,
    get_reviews_by_user,
    count_reviews_by_user,
)

__all__ = [
    "get_user_by_email",
    "get_user_by_id",
    "create_user",
    "authenticate_user",
    "get_users",
    "create_book",
    "search_books",
    "count_books",
    "get_book_by_id",
    "require_book",
    "list_genres",
    "create_review",
    "update_review",
    "delete_review",
    "get_review_by_id",
    "get_user_review_for_book",
    "get_reviews_for_book",
    "get_reviews_for_book_with_user",
    "get_reviews_by_user",
    "count_reviews_by_user",
]

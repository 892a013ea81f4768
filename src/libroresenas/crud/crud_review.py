"""
Operaciones sobre reseñas: alta, edición y borrado, más las consultas de lectura.

Reglas que se aplican aquí:
- Un usuario solo puede tener una reseña por libro. Se comprueba antes de
  insertar y, para las carreras entre peticiones, lo garantiza la
  UniqueConstraint de la tabla (IntegrityError -> DuplicateError).
- Solo el autor puede editar o borrar su reseña; para cualquier otro usuario
  la reseña "no existe" (ForbiddenError hereda de NotFoundError).
- Tras cada alta, edición o borrado confirmado se recalcula la valoración
  del libro. Si ese recálculo falla, la reseña se queda como está y el
  agregado se corrige en el siguiente cambio.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import asc, desc, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..models.book import Book
from ..models.review import Review
from ..models.user import User
from ..schemas.review import ReviewCreate, ReviewUpdate
from ..services.ratings import SqlAlchemyRatingStore, recompute_book_rating

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)
ReadT = TypeVar("ReadT")

REVIEW_SORT_FIELDS = {
    "rating": Review.rating,
    "created_at": Review.created_at,
}


def _validate(schema: Type[SchemaT], payload: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Devuelve el payload como instancia de `schema`, validándolo si es un dict."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {schema.__name__}: {exc.error_count()} error(s)",
                              errors=exc.errors()) from exc


def _refresh_book_rating(db: Session, book_id: int, action: str) -> None:
    """
    Recalcula la valoración de un libro tras una mutación ya confirmada.

    Un StorageError se registra y se descarta: la reseña es la fuente de
    verdad y el agregado puede reconstruirse más tarde.
    """
    try:
        recompute_book_rating(SqlAlchemyRatingStore(db), book_id)
    except StorageError:
        logger.exception(f"Could not update rating of book {book_id} after review {action}; "
                         f"it stays stale until the next review change.")
        db.rollback()


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error committing review {action}: {exc}")
        raise StorageError(f"Could not commit review {action}") from exc


def _get_owned_review(db: Session, review_id: int, requesting_user_id: int, action: str) -> Review:
    db_review = get_review_by_id(db, review_id)

    if not db_review:
        logger.warning(f"Attempted {action} of non-existent review ID: {review_id}")
        raise NotFoundError(f"Review {review_id} not found")

    if db_review.user_id != requesting_user_id:
        logger.warning(f"Unauthorized attempt: User {requesting_user_id} tried to {action} "
                       f"review {review_id} owned by {db_review.user_id}")
        raise ForbiddenError(f"Review {review_id} not found or you are not authorized to {action} it")

    return db_review


def create_review(db: Session, review: Union[ReviewCreate, Mapping[str, Any]],
                  user_id: int, book_id: int) -> Review:
    """
    Crea la reseña de `user_id` para `book_id` y recalcula la valoración del libro.

    Raises:
        ValidationError: rating o text no válidos.
        NotFoundError: el libro o el usuario no existen.
        DuplicateError: el usuario ya tiene una reseña de este libro.
        StorageError: la base de datos no pudo guardar la reseña.
    """
    review = _validate(ReviewCreate, review)

    try:
        book = db.get(Book, book_id)
        user = db.get(User, user_id)
        existing = get_user_review_for_book(db, user_id=user_id, book_id=book_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Could not check review preconditions for book {book_id}") from exc

    if book is None:
        logger.warning(f"Attempted review of non-existent book ID: {book_id}")
        raise NotFoundError(f"Book {book_id} not found")
    if user is None:
        logger.warning(f"Attempted review by non-existent user ID: {user_id}")
        raise NotFoundError(f"User {user_id} not found")
    if existing is not None:
        raise DuplicateError("You have already reviewed this book; update your existing review instead")

    db_review = Review(**review.model_dump(), user_id=user_id, book_id=book_id)
    db.add(db_review)
    try:
        db.commit()
    except IntegrityError as exc:
        # Otra petición insertó la misma pareja (libro, usuario) entre la comprobación y el commit
        db.rollback()
        logger.warning(f"Duplicate review rejected by the database for book {book_id}, user {user_id}")
        raise DuplicateError("You have already reviewed this book; update your existing review instead") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error committing review creation for book {book_id}: {exc}")
        raise StorageError("Could not commit review creation") from exc

    # La reseña ya está confirmada: el recálculo va antes de cualquier otra lectura
    _refresh_book_rating(db, book_id, "creation")

    try:
        db.refresh(db_review)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Review for book {book_id} by user {user_id} was saved but could not be reloaded: {exc}")
        raise StorageError("Review created but could not be reloaded") from exc

    logger.info(f"Review {db_review.id} created for book {book_id} by user {user_id}.")
    return db_review


def update_review(db: Session, review_id: int, requesting_user_id: int,
                  review_update: Union[ReviewUpdate, Mapping[str, Any]]) -> Review:
    """
    Edita rating y/o text de una reseña propia y recalcula la valoración del libro.

    book_id y user_id nunca cambian, así que solo hay que recalcular un libro.

    Raises:
        ValidationError: datos de edición no válidos.
        NotFoundError: la reseña no existe.
        ForbiddenError: la reseña es de otro usuario.
        StorageError: la base de datos no pudo guardar el cambio.
    """
    review_update = _validate(ReviewUpdate, review_update)
    db_review = _get_owned_review(db, review_id, requesting_user_id, "update")
    book_id = db_review.book_id

    for field, value in review_update.model_dump(exclude_unset=True).items():
        setattr(db_review, field, value)

    _commit(db, "update")
    logger.info(f"Review {review_id} updated by user {requesting_user_id}.")

    _refresh_book_rating(db, book_id, "update")
    return db_review


def delete_review(db: Session, review_id: int, requesting_user_id: int) -> None:
    """
    Borra definitivamente una reseña propia y recalcula la valoración del libro.

    Raises:
        NotFoundError: la reseña no existe.
        ForbiddenError: la reseña es de otro usuario.
        StorageError: la base de datos no pudo borrarla.
    """
    db_review = _get_owned_review(db, review_id, requesting_user_id, "delete")
    book_id = db_review.book_id # Get book_id BEFORE deleting

    db.delete(db_review)
    _commit(db, "deletion")
    logger.info(f"Review {review_id} deleted by user {requesting_user_id}.")

    _refresh_book_rating(db, book_id, "deletion")


def _read(db: Session, what: str, query: Callable[[], ReadT]) -> ReadT:
    """Ejecuta una consulta de lectura; los errores de la base de datos salen como StorageError."""
    try:
        return query()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error reading {what}: {exc}")
        raise StorageError(f"Could not read {what}") from exc


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    """Obtiene una reseña por su ID."""
    return _read(db, f"review {review_id}", lambda: db.get(Review, review_id))


def get_user_review_for_book(db: Session, user_id: int, book_id: int) -> Optional[Review]:
    """Obtiene la reseña de un usuario para un libro, si existe."""
    return _read(db, f"review of book {book_id} by user {user_id}", lambda: db.query(Review).\
            filter(Review.user_id == user_id, Review.book_id == book_id).\
            first())


def get_reviews_for_book(db: Session, book_id: int, limit: int = 20) -> list[Review]:
    """Obtiene las últimas 'limit' reseñas de un libro, la más reciente primero."""
    return _read(db, f"reviews of book {book_id}", lambda: db.query(Review).\
            filter(Review.book_id == book_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            limit(limit).all())


def get_reviews_for_book_with_user(db: Session, book_id: int, limit: Optional[int] = None) -> list:
    """Obtiene las reseñas de un libro junto al nombre de su autor, la más reciente primero.
       Sin 'limit' devuelve todas. Devuelve una lista de Rows con (Review, User.name).
    """
    return _read(db, f"reviews of book {book_id}", lambda: db.query(Review, User.name).\
            join(User, Review.user_id == User.id).\
            filter(Review.book_id == book_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            limit(limit).all())


def get_reviews_by_user(db: Session, user_id: int, skip: int = 0, limit: Optional[int] = None,
                        sort_by: str = "created_at", sort_order: str = "desc") -> list[Review]:
    """
    Lista paginada de las reseñas de un usuario ("mis reseñas").

    Args:
        sort_by (str): "rating" o "created_at"; cualquier otro valor ordena por
            fecha de creación descendente.
        sort_order (str): "asc" o "desc".
    """
    column = REVIEW_SORT_FIELDS.get(sort_by)
    if column is None:
        order = desc(Review.created_at)
    else:
        order = asc(column) if sort_order == "asc" else desc(column)

    return _read(db, f"reviews by user {user_id}", lambda: db.query(Review).\
            filter(Review.user_id == user_id).\
            order_by(order, desc(Review.id)).\
            offset(max(skip, 0)).\
            limit(settings.clamp_page_size(limit)).all())


def count_reviews_by_user(db: Session, user_id: int) -> int:
    """Número total de reseñas de un usuario, para paginar."""
    return _read(db, f"review count of user {user_id}",
                 lambda: db.query(func.count(Review.id)).filter(Review.user_id == user_id).scalar()) or 0

"""
Operaciones CRUD para el modelo Book en la base de datos.
Incluye el alta de libros, la búsqueda filtrada, paginada y ordenada del
catálogo, y la obtención por ID.
Los campos average_rating y review_count no se tocan aquí: los mantiene services.ratings.
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, func, asc, desc
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.exceptions import DuplicateError, NotFoundError, StorageError, ValidationError
from ..models.book import Book, Genre, slugify_title
from ..schemas.book import BookCreate

logger = logging.getLogger(__name__)

BOOK_SORT_FIELDS = {
    "title": Book.title,
    "author": Book.author,
    "genre": Book.genre,
    "average_rating": Book.average_rating,
    "created_at": Book.created_at,
    "review_count": Book.review_count,
}

def _book_filters(genre: Optional[str], author: Optional[str], query: Optional[str]) -> list:
    filters = []
    if genre and genre != "all":
        try:
            filters.append(Book.genre == Genre(genre))
        except ValueError as exc:
            raise ValidationError(f"Unknown genre '{genre}'") from exc
    if author:
        filters.append(Book.author.ilike(f"%{author}%"))
    if query:
        # Búsqueda general en título y autor
        filters.append(or_(
            Book.title.ilike(f"%{query}%"),
            Book.author.ilike(f"%{query}%"),
        ))
    return filters

def create_book(db: Session, book: Union[BookCreate, Mapping[str, Any]]) -> Book:
    """
    Da de alta un libro nuevo con valoración 0 y ninguna reseña.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        book (BookCreate | dict): Datos del libro.

    Returns:
        Book: El libro creado.

    Raises:
        ValidationError: Si los datos no son válidos.
        DuplicateError: Si ya existe un libro con el mismo título y autor (sin distinguir mayúsculas).
        StorageError: Si la base de datos no pudo guardar el libro.
    """
    if not isinstance(book, BookCreate):
        try:
            book = BookCreate.model_validate(book)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid BookCreate: {exc.error_count()} error(s)",
                                  errors=exc.errors()) from exc

    stmt = select(Book).where(
        func.lower(Book.title) == book.title.lower(),
        func.lower(Book.author) == book.author.lower(),
    )
    try:
        existing = db.execute(stmt).scalars().first()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Could not check for duplicate books") from exc
    if existing:
        raise DuplicateError("A book with this title and author already exists")

    db_book = Book(
        title=book.title,
        author=book.author,
        genre=book.genre,
        slug=slugify_title(book.title),
        average_rating=0.0,
        review_count=0,
    )
    db.add(db_book)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error committing book creation '{book.title}': {exc}")
        raise StorageError("Could not commit book creation") from exc
    db.refresh(db_book)
    logger.info(f"Book {db_book.id} '{db_book.title}' created.")
    return db_book

def search_books(
    db: Session,
    genre: Optional[str] = None,
    author: Optional[str] = None,
    query: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[Book]:
    """
    Busca libros en el catálogo por género, autor o un término general.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        genre (Optional[str]): Género exacto; "all" equivale a no filtrar.
        author (Optional[str]): Coincidencia parcial en el autor, sin distinguir mayúsculas.
        query (Optional[str]): Término buscado en título o autor.
        sort_by (str): Campo de orden; uno desconocido ordena por created_at descendente.
        sort_order (str): "asc" o "desc".
        skip (int): Número de libros a omitir (paginación).
        limit (Optional[int]): Tamaño de página, acotado por settings.MAX_PAGE_SIZE.

    Returns:
        List[Book]: Libros que cumplen los criterios.

    Raises:
        ValidationError: Si el género no existe.
        StorageError: Si la base de datos no responde.
    """
    stmt = select(Book)
    filters = _book_filters(genre, author, query)
    if filters:
        stmt = stmt.where(*filters)

    column = BOOK_SORT_FIELDS.get(sort_by)
    if column is None:
        stmt = stmt.order_by(desc(Book.created_at), desc(Book.id))
    else:
        direction = asc if sort_order == "asc" else desc
        stmt = stmt.order_by(direction(column), direction(Book.id))

    stmt = stmt.offset(max(skip, 0)).limit(settings.clamp_page_size(limit))
    try:
        result = db.execute(stmt)
        return result.scalars().all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error searching books: {exc}")
        raise StorageError("Could not search books") from exc

def count_books(
    db: Session,
    genre: Optional[str] = None,
    author: Optional[str] = None,
    query: Optional[str] = None,
) -> int:
    """Cuenta los libros que cumplen los mismos filtros que search_books."""
    stmt = select(func.count(Book.id))
    filters = _book_filters(genre, author, query)
    if filters:
        stmt = stmt.where(*filters)
    try:
        return db.execute(stmt).scalar() or 0
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error counting books: {exc}")
        raise StorageError("Could not count books") from exc

def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    """
    Recupera un libro por su ID primario.

    Returns:
        Optional[Book]: El objeto Book si se encuentra, None si no existe.

    Raises:
        StorageError: Si la base de datos no responde.
    """
    try:
        return db.get(Book, book_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Could not load book {book_id}") from exc

def require_book(db: Session, book_id: int) -> Book:
    """Como get_book_by_id, pero lanza NotFoundError si el libro no existe."""
    book = get_book_by_id(db, book_id)
    if book is None:
        raise NotFoundError(f"Book {book_id} not found")
    return book

def list_genres() -> List[str]:
    """Devuelve los géneros admitidos, en el orden en que se presentan al usuario."""
    return [genre.value for genre in Genre]

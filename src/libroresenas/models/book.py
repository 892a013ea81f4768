"""
Modelo ORM para la entidad Book en la base de datos de LibroReseñas.
Define los campos descriptivos de un libro, sus agregados de valoración
(average_rating, review_count) y su relación con las reseñas.
"""

import enum
import re
from datetime import datetime, timezone

from sqlalchemy import (Column, Integer, String, Float, DateTime, Enum,
                        CheckConstraint)
from sqlalchemy.orm import relationship
from libroresenas.db.session import Base


class Genre(str, enum.Enum):
    """Géneros admitidos para un libro. Se guarda el valor legible."""
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-Help"
    BUSINESS = "Business"
    TECHNOLOGY = "Technology"
    HEALTH = "Health"
    TRAVEL = "Travel"
    CHILDREN = "Children"
    YOUNG_ADULT = "Young Adult"
    OTHER = "Other"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def slugify_title(title: str) -> str:
    """
    Convierte un título en slug: minúsculas, sin signos, espacios como guiones.

    Args:
        title (str): Título del libro.

    Returns:
        str: Slug derivado, p. ej. "The Left Hand of Darkness" -> "the-left-hand-of-darkness".
    """
    slug = re.sub(r"[^\w\s-]", "", title.lower())
    return re.sub(r"\s+", "-", slug.strip())


class Book(Base):
    """
    Representa un libro en la base de datos.

    Atributos:
        id (int): Identificador primario del libro.
        title (str): Título del libro.
        author (str): Autor del libro.
        genre (Genre): Género literario, dentro de un conjunto fijo.
        slug (str): Versión del título apta para URLs.
        average_rating (float): Media de las reseñas, redondeada a un decimal.
            Campo derivado, solo lo escribe services.ratings.
        review_count (int): Número de reseñas. Campo derivado.
        created_at (datetime): Fecha de alta.
        updated_at (datetime): Fecha de la última modificación.
        reviews (List[Review]): Reseñas asociadas al libro.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), index=True, nullable=False)
    author = Column(String(100), index=True, nullable=False)
    genre = Column(
        Enum(Genre, name="book_genre", values_callable=lambda e: [m.value for m in e],
             native_enum=False, create_constraint=True, length=50),
        nullable=False,
        default=Genre.OTHER,
        index=True,
    )
    slug = Column(String(255), index=True, nullable=True)
    average_rating = Column(Float, nullable=False, default=0.0, server_default="0", index=True)
    review_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    reviews = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint('average_rating >= 0 AND average_rating <= 5', name='book_average_rating_check'),
        CheckConstraint('review_count >= 0', name='book_review_count_check'),
    )

    def __repr__(self) -> str:
        """
        Representación legible del objeto Book para depuración.

        Returns:
            str: Cadena representando el libro y su valoración.
        """
        return (f"<Book(id={self.id}, title='{self.title[:30]}', "
                f"average_rating={self.average_rating}, review_count={self.review_count})>")

"""
Esquemas Pydantic para la entidad Book en LibroReseñas.
Los agregados de valoración aparecen solo en el esquema de salida: ningún
cliente puede fijar average_rating ni review_count.
"""

from pydantic import BaseModel, Field, ConfigDict
import datetime

from libroresenas.models.book import Genre

class BookCreate(BaseModel):
    """
    Esquema para dar de alta un libro.

    Atributos:
        title (str): Título, entre 1 y 200 caracteres.
        author (str): Autor, entre 2 y 100 caracteres.
        genre (Genre): Género; "Other" si no se indica.
    """
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=2, max_length=100)
    genre: Genre = Genre.OTHER

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

class BookSchema(BaseModel):
    """Esquema de salida de un libro, con sus agregados."""
    id: int
    title: str
    author: str
    genre: Genre
    slug: str | None = None
    average_rating: float
    review_count: int
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)

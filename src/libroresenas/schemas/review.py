"""
Esquemas Pydantic para la entidad Review en LibroReseñas.
Define los modelos de entrada y salida para validación y serialización de reseñas.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
import datetime
from typing import Optional

from libroresenas.models.review import REVIEW_TEXT_MAX_LENGTH

def _reject_bool(value):
    # bool es subclase de int: sin esto True pasaría como 1
    if isinstance(value, bool):
        raise ValueError("rating must be an integer, not a boolean")
    return value

class ReviewBase(BaseModel):
    """
    Esquema base para una reseña, usado como base para creación y visualización.

    Atributos:
        rating (int): Calificación entera entre 1 y 5. Se aceptan 4.0 y "4";
            4.5 y los booleanos se rechazan.
        text (Optional[str]): Texto opcional de la reseña, máximo 1000 caracteres.
    """
    rating: int = Field(..., ge=1, le=5)
    text: Optional[str] = Field(None, max_length=REVIEW_TEXT_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("rating", mode="before")
    @classmethod
    def reject_bool_rating(cls, value):
        return _reject_bool(value)

class ReviewCreate(ReviewBase):
    """
    Esquema para la creación de una reseña.
    No requiere campos adicionales; user_id y book_id se gestionan aparte.
    """
    pass

class ReviewUpdate(BaseModel):
    """
    Esquema para editar una reseña existente.

    Solo rating y text son editables; book_id y user_id no forman parte del
    esquema, así que no hay forma de cambiarlos. Debe venir al menos un campo.
    """
    rating: Optional[int] = Field(None, ge=1, le=5)
    text: Optional[str] = Field(None, max_length=REVIEW_TEXT_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("rating", mode="before")
    @classmethod
    def reject_bool_rating(cls, value):
        return _reject_bool(value)

    @model_validator(mode="after")
    def check_not_empty(self) -> "ReviewUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one of 'rating' or 'text' must be provided")
        if "rating" in self.model_fields_set and self.rating is None:
            raise ValueError("rating cannot be null")
        return self

class ReviewSchema(ReviewBase):
    """
    Esquema de salida para una reseña, incluyendo campos adicionales.

    Atributos:
        id (int): ID de la reseña.
        user_id (int): ID del usuario que hizo la reseña.
        book_id (int): ID del libro reseñado.
        created_at (datetime.datetime): Fecha de creación de la reseña.
        updated_at (datetime.datetime): Fecha de la última edición.
    """
    id: int
    user_id: int
    book_id: int
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)

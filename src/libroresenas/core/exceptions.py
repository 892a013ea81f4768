"""
Excepciones de dominio de LibroReseñas.

Toda la capa de servicios (crud/ y services/) señala sus fallos con estas
clases; las excepciones de SQLAlchemy y pydantic se traducen aquí antes de
llegar al llamador.
"""


class LibroResenasError(Exception):
    """Base de todas las excepciones del proyecto."""


class DuplicateError(LibroResenasError):
    """The user already reviewed this book, or the book already exists."""


class NotFoundError(LibroResenasError):
    """A referenced book, user or review does not exist."""


class ForbiddenError(NotFoundError):
    """
    The requester does not own the review.

    Subclasses NotFoundError so callers that only handle "not found" report
    both cases the same way and never reveal that the review exists.
    """


class ValidationError(LibroResenasError):
    """
    Invalid input (rating outside 1-5, non-integer rating, text too long...).

    Attributes:
        errors (list): Error details as returned by pydantic's ``errors()``.
    """

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class StorageError(LibroResenasError):
    """The underlying database could not complete the operation."""

# Importar todos los modelos para que queden registrados en Base.metadata
from .book import Book, Genre
from .review import Review
from .user import User

__all__ = ["Book", "Genre", "Review", "User"]

"""
Script para generación de datos falsos en la base de datos de LibroReseñas.

Este módulo crea libros, usuarios y reseñas de prueba utilizando Faker y las
funciones CRUD del proyecto. Las reseñas pasan por crud_review.create_review,
así que cada libro termina con su valoración media y su número de reseñas al día.

Uso:
    Ejecutar directamente este script para poblar la base de datos. Crea las
    tablas si no existen.

Nota:
    - Los usuarios generados tendrán una contraseña común definida en FAKE_PASSWORD.
    - Los libros o usuarios repetidos se saltan, no se consideran un error.
"""

import random
import logging
from faker import Faker
from sqlalchemy.orm import Session
from typing import List, Optional

from libroresenas.core.config import settings
from libroresenas.core.exceptions import DuplicateError, LibroResenasError
from libroresenas.db.session import SessionLocal, init_db
from libroresenas.models.book import Genre
from libroresenas.schemas.book import BookCreate
from libroresenas.schemas.user import UserCreate
from libroresenas.schemas.review import ReviewCreate
from libroresenas.crud.crud_book import create_book
from libroresenas.crud.crud_user import create_user, get_user_by_email
from libroresenas.crud.crud_review import create_review

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

NUM_FAKE_BOOKS: int = 40
NUM_FAKE_USERS: int = 50
MAX_REVIEWS_PER_USER: int = 15
MIN_REVIEWS_PER_USER: int = 2
FAKE_PASSWORD: str = "password123"

fake = Faker(['es_ES', 'en_US'])

def create_fake_books(db: Session) -> List[int]:
    """Crea NUM_FAKE_BOOKS libros y devuelve sus IDs."""
    book_ids: List[int] = []
    genres = list(Genre)
    for i in range(NUM_FAKE_BOOKS):
        book_in = BookCreate(
            title=fake.sentence(nb_words=random.randint(2, 5)).rstrip("."),
            author=fake.name(),
            genre=random.choice(genres),
        )
        try:
            book = create_book(db, book_in)
        except DuplicateError:
            logger.warning(f"  ({i+1}/{NUM_FAKE_BOOKS}) Libro repetido '{book_in.title}', se omite.")
            continue
        book_ids.append(book.id)
    logger.info(f"Se crearon {len(book_ids)} libros.")
    return book_ids

def create_fake_users(db: Session) -> List[int]:
    """Crea (o reutiliza) NUM_FAKE_USERS usuarios y devuelve sus IDs."""
    user_ids: List[int] = []
    for i in range(NUM_FAKE_USERS):
        fake_email: str = fake.unique.safe_email()
        existing_user = get_user_by_email(db, email=fake_email)
        if existing_user:
            user_ids.append(existing_user.id)
            continue
        user_in = UserCreate(email=fake_email, name=fake.name(), password=FAKE_PASSWORD)
        try:
            user_ids.append(create_user(db=db, user=user_in).id)
        except DuplicateError:
            logger.warning(f"  ({i+1}/{NUM_FAKE_USERS}) Email repetido {fake_email}, se omite.")
    logger.info(f"{len(user_ids)} IDs de usuario listos.")
    return user_ids

def create_fake_reviews(db: Session, user_ids: List[int], book_ids: List[int]) -> int:
    """Genera entre MIN y MAX reseñas por usuario, cada una de un libro distinto."""
    total_reviews_added: int = 0
    for user_id in user_ids:
        num_reviews: int = min(random.randint(MIN_REVIEWS_PER_USER, MAX_REVIEWS_PER_USER), len(book_ids))
        for book_id in random.sample(book_ids, num_reviews):
            fake_text: Optional[str] = fake.paragraph(nb_sentences=random.randint(1, 4)) if random.random() < 0.7 else None
            review_in = ReviewCreate(rating=random.randint(1, 5), text=fake_text[:1000] if fake_text else None)
            try:
                create_review(db=db, review=review_in, user_id=user_id, book_id=book_id)
                total_reviews_added += 1
            except LibroResenasError as e:
                logger.warning(f"  No se pudo crear la reseña de User {user_id} para Book {book_id}: {e}")
    return total_reviews_added

def generate_data() -> None:
    """
    Genera libros, usuarios y reseñas falsas en la base de datos.
    """
    logger.info("=============================================")
    logger.info(" Iniciando script de generación de datos falsos")
    logger.info("=============================================")

    init_db()
    db: Optional[Session] = None
    try:
        db = SessionLocal()
        logger.info(f"--- Fase 1: Creando {NUM_FAKE_BOOKS} Libros Falsos ---")
        book_ids = create_fake_books(db)
        logger.info(f"--- Fase 2: Creando/Verificando {NUM_FAKE_USERS} Usuarios Falsos ---")
        user_ids = create_fake_users(db)
        if not book_ids or not user_ids:
            logger.error("Sin libros o sin usuarios no se pueden generar reseñas.")
            return
        logger.info(f"--- Fase 3: Generando Reseñas Falsas ({MIN_REVIEWS_PER_USER}-{MAX_REVIEWS_PER_USER} por usuario) ---")
        total = create_fake_reviews(db, user_ids, book_ids)
        logger.info(f"--- Fase 3 Completada: Total reseñas falsas añadidas: {total} ---")
    except LibroResenasError as e:
        logger.exception(f"Error CRÍTICO durante la generación de datos: {e}")
    finally:
        if db:
            logger.info("Cerrando sesión de base de datos.")
            db.close()

if __name__ == "__main__":
    generate_data()
    logger.info("============================================")
    logger.info(" Script de Generación de Datos Finalizado")
    logger.info("============================================")

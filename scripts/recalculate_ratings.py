"""
Script para recalcular la valoración media y el número de reseñas de los libros.

Si un recálculo falló después de guardar una reseña (por ejemplo, por una caída
de la base de datos), el libro queda con agregados desfasados hasta la
siguiente reseña. Este script los reconstruye a partir de la tabla de reseñas.

Uso:
    python scripts/recalculate_ratings.py               # todos los libros
    python scripts/recalculate_ratings.py --book-id 42  # un solo libro
"""

import argparse
import logging
import sys

from libroresenas.core.config import settings
from libroresenas.core.exceptions import StorageError
from libroresenas.db.session import SessionLocal, init_db
from libroresenas.services.ratings import recalculate_all_book_ratings, recalculate_book_rating

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recalcula los agregados de valoración de los libros.")
    parser.add_argument("--book-id", type=int, default=None,
                        help="ID del libro a recalcular (por defecto, todos)")
    parser.add_argument("--create-tables", action="store_true",
                        help="Crea las tablas si aún no existen")
    return parser.parse_args(argv)

def main(argv=None) -> int:
    """
    Punto de entrada del script.

    Returns:
        int: Código de salida (0 si todo fue bien).
    """
    args = parse_args(argv)
    if args.create_tables:
        init_db()

    db = SessionLocal()
    try:
        if args.book_id is not None:
            summary = recalculate_book_rating(db, args.book_id)
            if summary is None:
                logger.error(f"El libro {args.book_id} no existe.")
                return 1
            logger.info(f"Libro {args.book_id}: media {summary.average_rating} "
                        f"con {summary.review_count} reseña(s).")
        else:
            updated = recalculate_all_book_ratings(db)
            logger.info(f"Se recalcularon {updated} libro(s).")
    except StorageError:
        logger.exception("No se pudo acceder a la base de datos.")
        return 2
    finally:
        db.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())

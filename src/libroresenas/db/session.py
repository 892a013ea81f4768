"""
Configuración de la sesión de base de datos SQLAlchemy en LibroReseñas.
Incluye la creación del motor, la fábrica de sesiones y la clase base para los modelos ORM.
Proporciona además una función para crear las tablas.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from libroresenas.core.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, echo=settings.SQL_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def init_db(bind=None) -> None:
    """
    Crea las tablas de todos los modelos registrados si no existen.

    Args:
        bind: Motor a usar; por defecto el configurado en settings.
    """
    # Registrar los modelos en Base.metadata antes de crear las tablas
    import libroresenas.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

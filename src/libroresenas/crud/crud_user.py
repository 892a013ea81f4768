"""
Operaciones CRUD para el modelo User en la base de datos de LibroReseñas.
Incluye el registro de usuarios, su búsqueda por email o ID, el listado
paginado y la comprobación de credenciales.
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ..core.exceptions import DuplicateError, StorageError
from ..models.user import User
from ..schemas.user import UserCreate
from ..core.security import get_password_hash, verify_and_rehash
from typing import Optional, List, Any

logger = logging.getLogger(__name__)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Obtiene un usuario por su email.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        email (str): Email del usuario a buscar.

    Returns:
        Optional[User]: El usuario si existe, None si no.

    Raises:
        StorageError: Si la base de datos no responde.
    """
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Could not look up user by email") from exc

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Obtiene un usuario por su ID primario."""
    try:
        return db.get(User, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Could not load user {user_id}") from exc

def create_user(db: Session, user: UserCreate) -> User:
    """
    Registra un nuevo usuario con la contraseña hasheada.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        user (UserCreate): Datos del usuario a crear.

    Returns:
        User: El usuario creado.

    Raises:
        DuplicateError: Si el email ya está registrado.
        StorageError: Si la base de datos no pudo guardar el usuario.
    """
    hashed_password: str = get_password_hash(user.password)
    db_user: User = User(email=user.email, name=user.name, hashed_password=hashed_password)
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError(f"A user with email {user.email} already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Error committing user creation for {user.email}: {exc}")
        raise StorageError("Could not commit user creation") from exc
    db.refresh(db_user)
    logger.info(f"User {db_user.id} registered.")
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Comprueba las credenciales de un usuario activo.

    Si el hash guardado usa parámetros obsoletos se sustituye por uno nuevo.

    Returns:
        Optional[User]: El usuario si email y contraseña coinciden, None si no.
    """
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    valid, new_hash = verify_and_rehash(password, user.hashed_password)
    if not valid:
        return None
    if new_hash:
        user.hashed_password = new_hash
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(f"Error storing rehashed password for user {user.id}: {exc}")
            raise StorageError("Could not update password hash") from exc
    return user

def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[Any]:
    """
    Obtiene una lista paginada de usuarios sin la contraseña hasheada.

    Returns:
        List[Any]: Rows con id, email, name, is_active y created_at.
    """
    try:
        return db.query(
            User.id,
            User.email,
            User.name,
            User.is_active,
            User.created_at,
        ).order_by(User.id).offset(skip).limit(limit).all()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Could not list users") from exc

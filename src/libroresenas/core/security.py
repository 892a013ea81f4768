"""
Hasheo de contraseñas para las cuentas de LibroReseñas.

Las reseñas siempre pertenecen a un usuario registrado; este módulo es lo
único que el proyecto necesita de la autenticación: guardar la contraseña
como hash bcrypt (passlib) y comprobarla al iniciar sesión.
"""

from typing import Optional, Tuple

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def get_password_hash(password: str) -> str:
    """
    Genera el hash bcrypt de una contraseña en texto plano.

    Args:
        password (str): Contraseña a hashear.

    Returns:
        str: Hash listo para guardar en User.hashed_password.
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Comprueba una contraseña contra su hash almacenado."""
    return pwd_context.verify(plain_password, hashed_password)

def verify_and_rehash(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """
    Verifica la contraseña y, si el hash usa parámetros obsoletos, devuelve uno nuevo.

    Returns:
        Tuple[bool, Optional[str]]: (coincide, nuevo_hash o None si no hace falta).
    """
    return pwd_context.verify_and_update(plain_password, hashed_password)

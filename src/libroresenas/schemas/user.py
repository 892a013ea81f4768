"""
Esquemas Pydantic para la entidad User en LibroReseñas.
Define los modelos de entrada y salida para el registro y la visualización de usuarios.
"""

from pydantic import BaseModel, EmailStr, ConfigDict, Field

class UserCreate(BaseModel):
    """
    Esquema para el registro de un usuario.

    Atributos:
        email (EmailStr): Correo electrónico del usuario.
        name (str): Nombre visible, entre 2 y 100 caracteres.
        password (str): Contraseña en texto plano (se hashea antes de almacenarse).
    """
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=6, max_length=72)

class UserSchema(BaseModel):
    """Esquema de salida para un usuario (sin contraseña)."""
    id: int
    email: EmailStr
    name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

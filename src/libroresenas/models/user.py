"""
Modelo ORM para la entidad User en la base de datos de LibroReseñas.
Un usuario registrado es el único autor posible de una reseña.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from libroresenas.db.session import Base

class User(Base):
    """
    Representa un usuario registrado en el sistema.

    Atributos:
        id (int): Identificador primario del usuario.
        email (str): Correo electrónico único del usuario.
        name (str): Nombre visible junto a sus reseñas.
        hashed_password (str): Contraseña almacenada como hash bcrypt.
        is_active (bool): Indica si el usuario está activo.
        created_at (datetime): Fecha de registro.
        updated_at (datetime): Fecha de última actualización.
        reviews (List[Review]): Reseñas escritas por el usuario.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False)

    reviews = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', name='{self.name}')>"

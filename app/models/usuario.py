import datetime
import uuid
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, String, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Usuario(Base):
    """
    Modelo ORM para la tabla 'usuarios'.
    """
    __tablename__ = "usuarios"
    __table_args__ = (
        CheckConstraint("rol IN ('tecnico', 'supervisor', 'admin')", name="rol_valido"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    nombre: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    technician_id: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    rol: Mapped[str] = mapped_column(String(20), default="tecnico", server_default="tecnico")
    hashed_password: Mapped[str] = mapped_column("password_hash", String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    ultimo_login: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Usuario(id={self.id}, email='{self.email}', rol='{self.rol}')>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, String, Text, Uuid, true
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .repuesto_equipo import RepuestoEquipo


class Equipo(Base):
    """
    Modelo ORM para la tabla 'equipos' (maquinaria que consume repuestos).
    """
    __tablename__ = "equipos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    sap: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True, index=True)
    nombre: Mapped[str] = mapped_column(String(100), index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    marca: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    modelo: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    numero_serie: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    repuestos: Mapped[List["RepuestoEquipo"]] = relationship(
        "RepuestoEquipo",
        back_populates="equipo",
        lazy="select",
        cascade="all, delete-orphan",
    )

    @property
    def conteos(self) -> dict:
        return {"repuestos": self.num_repuestos}

    def __repr__(self) -> str:
        return f"<Equipo(id={self.id}, codigo='{self.codigo}', nombre='{self.nombre}')>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, String, Text, Uuid, true
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .armario import Armario
    from .estanteria import Estanteria


class Ubicacion(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'ubicaciones'. Raíz de la jerarquía de almacenamiento.
    """
    __tablename__ = "ubicaciones"
    tipo_ubicacion = "ubicacion"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    armarios: Mapped[List["Armario"]] = relationship(
        "Armario", back_populates="ubicacion", lazy="select", order_by="Armario.codigo"
    )
    estanterias: Mapped[List["Estanteria"]] = relationship(
        "Estanteria", back_populates="ubicacion", lazy="select", order_by="Estanteria.codigo"
    )

    @property
    def conteos(self) -> dict:
        return {"armarios": self.num_armarios, "estanterias": self.num_estanterias}

    def __repr__(self) -> str:
        return f"<Ubicacion(id={self.id}, codigo='{self.codigo}', nombre='{self.nombre}')>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .ubicacion import Ubicacion
    from .cajon import Cajon
    from .organizador import Organizador
    from .repuesto_ubicacion import RepuestoUbicacion


class Armario(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'armarios'.
    """
    __tablename__ = "armarios"
    tipo_ubicacion = "armario"
    __table_args__ = (
        UniqueConstraint("ubicacion_id", "codigo", name="uq_armarios_ubicacion_codigo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50))
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ubicacion_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("ubicaciones.id"), index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ubicacion: Mapped["Ubicacion"] = relationship("Ubicacion", back_populates="armarios", lazy="selectin")
    cajones: Mapped[List["Cajon"]] = relationship(
        "Cajon", back_populates="armario", lazy="select", order_by="Cajon.codigo"
    )
    organizadores: Mapped[List["Organizador"]] = relationship(
        "Organizador", back_populates="armario", lazy="select", order_by="Organizador.codigo"
    )
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="armario", lazy="select"
    )

    @property
    def padre(self):
        return self.ubicacion

    @property
    def conteos(self) -> dict:
        return {
            "cajones": self.num_cajones,
            "organizadores": self.num_organizadores,
            "repuestos": self.num_repuestos,
        }

    def __repr__(self) -> str:
        return f"<Armario(id={self.id}, codigo='{self.codigo}', nombre='{self.nombre}')>"

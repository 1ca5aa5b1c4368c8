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
    from .estante import Estante
    from .cajon import Cajon
    from .organizador import Organizador
    from .repuesto_ubicacion import RepuestoUbicacion


class Estanteria(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'estanterias'.
    """
    __tablename__ = "estanterias"
    tipo_ubicacion = "estanteria"
    __table_args__ = (
        UniqueConstraint("ubicacion_id", "codigo", name="uq_estanterias_ubicacion_codigo"),
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

    ubicacion: Mapped["Ubicacion"] = relationship("Ubicacion", back_populates="estanterias", lazy="selectin")
    estantes: Mapped[List["Estante"]] = relationship(
        "Estante", back_populates="estanteria", lazy="select", order_by="Estante.codigo"
    )
    cajones: Mapped[List["Cajon"]] = relationship(
        "Cajon", back_populates="estanteria", lazy="select", order_by="Cajon.codigo"
    )
    organizadores: Mapped[List["Organizador"]] = relationship(
        "Organizador", back_populates="estanteria", lazy="select", order_by="Organizador.codigo"
    )
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="estanteria", lazy="select"
    )

    @property
    def padre(self):
        return self.ubicacion

    @property
    def conteos(self) -> dict:
        return {
            "cajones": self.num_cajones,
            "estantes": self.num_estantes,
            "organizadores": self.num_organizadores,
            "repuestos": self.num_repuestos,
        }

    def __repr__(self) -> str:
        return f"<Estanteria(id={self.id}, codigo='{self.codigo}', nombre='{self.nombre}')>"

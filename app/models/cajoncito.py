import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .organizador import Organizador
    from .componente_ubicacion import ComponenteUbicacion
    from .repuesto_ubicacion import RepuestoUbicacion


class Cajoncito(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'cajoncitos' (compartimentos de un organizador).
    """
    __tablename__ = "cajoncitos"
    tipo_ubicacion = "cajoncito"
    __table_args__ = (
        UniqueConstraint("organizador_id", "codigo", name="uq_cajoncitos_organizador_codigo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50))
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    organizador_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizadores.id"), index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    organizador: Mapped["Organizador"] = relationship("Organizador", back_populates="cajoncitos", lazy="selectin")
    componente_ubicaciones: Mapped[List["ComponenteUbicacion"]] = relationship(
        "ComponenteUbicacion", back_populates="cajoncito", lazy="select"
    )
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="cajoncito", lazy="select"
    )

    @property
    def padre(self):
        return self.organizador

    @property
    def conteos(self) -> dict:
        return {
            "componentes": self.num_componentes,
            "repuestos": self.num_repuestos,
        }

    def __repr__(self) -> str:
        return f"<Cajoncito(id={self.id}, codigo='{self.codigo}')>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .estanteria import Estanteria
    from .repuesto_ubicacion import RepuestoUbicacion


class Estante(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'estantes' (repisas de una estantería).
    """
    __tablename__ = "estantes"
    tipo_ubicacion = "estante"
    __table_args__ = (
        UniqueConstraint("estanteria_id", "codigo", name="uq_estantes_estanteria_codigo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50))
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estanteria_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("estanterias.id"), index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    estanteria: Mapped["Estanteria"] = relationship("Estanteria", back_populates="estantes", lazy="selectin")
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="estante", lazy="select"
    )

    @property
    def padre(self):
        return self.estanteria

    @property
    def conteos(self) -> dict:
        return {"repuestos": self.num_repuestos}

    def __repr__(self) -> str:
        return f"<Estante(id={self.id}, codigo='{self.codigo}')>"

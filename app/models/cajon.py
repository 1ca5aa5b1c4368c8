import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .armario import Armario
    from .estanteria import Estanteria
    from .division import Division
    from .repuesto_ubicacion import RepuestoUbicacion


class Cajon(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'cajones'.
    Un cajón pertenece a un armario o a una estantería, nunca a ambos.
    """
    __tablename__ = "cajones"
    tipo_ubicacion = "cajon"
    __table_args__ = (
        CheckConstraint("(armario_id IS NULL) <> (estanteria_id IS NULL)", name="un_contenedor"),
        UniqueConstraint("armario_id", "codigo", name="uq_cajones_armario_codigo"),
        UniqueConstraint("estanteria_id", "codigo", name="uq_cajones_estanteria_codigo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50))
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    armario_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("armarios.id"), nullable=True, index=True)
    estanteria_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("estanterias.id"), nullable=True, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    armario: Mapped[Optional["Armario"]] = relationship("Armario", back_populates="cajones", lazy="selectin")
    estanteria: Mapped[Optional["Estanteria"]] = relationship("Estanteria", back_populates="cajones", lazy="selectin")
    divisiones: Mapped[List["Division"]] = relationship(
        "Division", back_populates="cajon", lazy="select", order_by="Division.codigo"
    )
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="cajon", lazy="select"
    )

    @property
    def padre(self):
        return self.armario or self.estanteria

    @property
    def conteos(self) -> dict:
        return {"divisiones": self.num_divisiones, "repuestos": self.num_repuestos}

    def __repr__(self) -> str:
        return f"<Cajon(id={self.id}, codigo='{self.codigo}')>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from .jerarquia import NodoJerarquia

if TYPE_CHECKING:
    from .cajon import Cajon
    from .repuesto_ubicacion import RepuestoUbicacion


class Division(NodoJerarquia, Base):
    """
    Modelo ORM para la tabla 'divisiones' (subdivisiones de un cajón).
    """
    __tablename__ = "divisiones"
    tipo_ubicacion = "division"
    __table_args__ = (
        UniqueConstraint("cajon_id", "codigo", name="uq_divisiones_cajon_codigo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50))
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cajon_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("cajones.id"), index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    cajon: Mapped["Cajon"] = relationship("Cajon", back_populates="divisiones", lazy="selectin")
    repuesto_ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion", back_populates="division", lazy="select"
    )

    @property
    def padre(self):
        return self.cajon

    @property
    def conteos(self) -> dict:
        return {"repuestos": self.num_repuestos}

    def __repr__(self) -> str:
        return f"<Division(id={self.id}, codigo='{self.codigo}')>"

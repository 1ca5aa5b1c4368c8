import datetime
import uuid
from typing import TYPE_CHECKING, Optional, Any

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .repuesto import Repuesto
    from .armario import Armario
    from .estanteria import Estanteria
    from .estante import Estante
    from .cajon import Cajon
    from .division import Division
    from .cajoncito import Cajoncito

# Tipo de ubicación -> columna FK en 'repuesto_ubicaciones'
LOCATION_COLUMNS = {
    "armario": "armario_id",
    "estanteria": "estanteria_id",
    "estante": "estante_id",
    "cajon": "cajon_id",
    "division": "division_id",
    "cajoncito": "cajoncito_id",
}

_exactly_one_location = " + ".join(
    f"(CASE WHEN {column} IS NOT NULL THEN 1 ELSE 0 END)" for column in LOCATION_COLUMNS.values()
) + " = 1"


class RepuestoUbicacion(Base):
    """
    Modelo ORM para la tabla 'repuesto_ubicaciones'.
    Cada fila apunta exactamente a un nivel de la jerarquía de almacenamiento.
    """
    __tablename__ = "repuesto_ubicaciones"
    __table_args__ = (
        CheckConstraint(_exactly_one_location, name="una_ubicacion"),
        CheckConstraint("cantidad >= 1", name="cantidad_positiva"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    repuesto_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("repuestos.id", ondelete="CASCADE"), index=True)
    cantidad: Mapped[int] = mapped_column(Integer, default=1)
    armario_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("armarios.id"), nullable=True, index=True)
    estanteria_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("estanterias.id"), nullable=True, index=True)
    estante_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("estantes.id"), nullable=True, index=True)
    cajon_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("cajones.id"), nullable=True, index=True)
    division_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("divisiones.id"), nullable=True, index=True)
    cajoncito_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("cajoncitos.id"), nullable=True, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    repuesto: Mapped["Repuesto"] = relationship("Repuesto", back_populates="ubicaciones", lazy="selectin")
    armario: Mapped[Optional["Armario"]] = relationship("Armario", back_populates="repuesto_ubicaciones", lazy="selectin")
    estanteria: Mapped[Optional["Estanteria"]] = relationship("Estanteria", back_populates="repuesto_ubicaciones", lazy="selectin")
    estante: Mapped[Optional["Estante"]] = relationship("Estante", back_populates="repuesto_ubicaciones", lazy="selectin")
    cajon: Mapped[Optional["Cajon"]] = relationship("Cajon", back_populates="repuesto_ubicaciones", lazy="selectin")
    division: Mapped[Optional["Division"]] = relationship("Division", back_populates="repuesto_ubicaciones", lazy="selectin")
    cajoncito: Mapped[Optional["Cajoncito"]] = relationship("Cajoncito", back_populates="repuesto_ubicaciones", lazy="selectin")

    @property
    def ubicacion_tipo(self) -> Optional[str]:
        for tipo, column in LOCATION_COLUMNS.items():
            if getattr(self, column) is not None:
                return tipo
        return None

    @property
    def ubicacion_id(self) -> Optional[uuid.UUID]:
        tipo = self.ubicacion_tipo
        return getattr(self, LOCATION_COLUMNS[tipo]) if tipo else None

    @property
    def ubicacion(self) -> Optional[Any]:
        """Nodo de la jerarquía al que apunta la fila."""
        tipo = self.ubicacion_tipo
        return getattr(self, tipo) if tipo else None

    def __repr__(self) -> str:
        return f"<RepuestoUbicacion(repuesto_id={self.repuesto_id}, tipo='{self.ubicacion_tipo}', cantidad={self.cantidad})>"

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .repuesto import Repuesto
    from .equipo import Equipo


class RepuestoEquipo(Base):
    """
    Modelo ORM para la tabla 'repuesto_equipos'.
    Asociación técnica: indica qué repuestos usa un equipo. No afecta al stock.
    """
    __tablename__ = "repuesto_equipos"
    __table_args__ = (
        UniqueConstraint("repuesto_id", "equipo_id", name="uq_repuesto_equipos_repuesto_equipo"),
        CheckConstraint("cantidad >= 1", name="cantidad_positiva"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    repuesto_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("repuestos.id", ondelete="CASCADE"), index=True)
    equipo_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("equipos.id", ondelete="CASCADE"), index=True)
    cantidad: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    repuesto: Mapped["Repuesto"] = relationship("Repuesto", back_populates="equipos", lazy="selectin")
    equipo: Mapped["Equipo"] = relationship("Equipo", back_populates="repuestos", lazy="selectin")

    def __repr__(self) -> str:
        return f"<RepuestoEquipo(repuesto_id={self.repuesto_id}, equipo_id={self.equipo_id})>"

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .componente import Componente
    from .cajoncito import Cajoncito


class ComponenteUbicacion(Base):
    """
    Modelo ORM para la tabla 'componente_ubicaciones'.
    Cantidad de un componente guardada en un cajoncito.
    """
    __tablename__ = "componente_ubicaciones"
    __table_args__ = (
        UniqueConstraint("componente_id", "cajoncito_id", name="uq_componente_ubicaciones_componente_cajoncito"),
        CheckConstraint("cantidad >= 1", name="cantidad_positiva"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    componente_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("componentes.id", ondelete="CASCADE"), index=True)
    cajoncito_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("cajoncitos.id"), index=True)
    cantidad: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    componente: Mapped["Componente"] = relationship("Componente", back_populates="ubicaciones", lazy="selectin")
    cajoncito: Mapped["Cajoncito"] = relationship("Cajoncito", back_populates="componente_ubicaciones", lazy="selectin")

    def __repr__(self) -> str:
        return f"<ComponenteUbicacion(componente_id={self.componente_id}, cajoncito_id={self.cajoncito_id}, cantidad={self.cantidad})>"

import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Integer, String, Uuid, true
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .componente_ubicacion import ComponenteUbicacion


class Componente(Base):
    """
    Modelo ORM para la tabla 'componentes' (componentes electrónicos).
    `valor_unidad` guarda una lista JSON de pares {"valor": ..., "unidad": ...}.
    """
    __tablename__ = "componentes"
    __table_args__ = (
        CheckConstraint(
            "categoria IN ('RESISTENCIA', 'CAPACITOR', 'INTEGRADO', 'VENTILADOR', 'OTROS')",
            name="categoria_valida",
        ),
        CheckConstraint("stock_minimo >= 0", name="stock_minimo_no_negativo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    categoria: Mapped[str] = mapped_column(String(20), index=True)
    descripcion: Mapped[str] = mapped_column(String(500))
    valor_unidad: Mapped[list] = mapped_column(JSON, default=list)
    stock_minimo: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ubicaciones: Mapped[List["ComponenteUbicacion"]] = relationship(
        "ComponenteUbicacion",
        back_populates="componente",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def stock_actual(self) -> int:
        """Stock calculado a partir de las cantidades en cajoncitos."""
        return sum(u.cantidad for u in self.ubicaciones)

    @property
    def codigo(self) -> str:
        return f"{self.categoria}-{self.id}"

    def __repr__(self) -> str:
        return f"<Componente(id={self.id}, categoria='{self.categoria}')>"

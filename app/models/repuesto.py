import datetime
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, Uuid, true
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from .repuesto_equipo import RepuestoEquipo
    from .repuesto_ubicacion import RepuestoUbicacion


class Repuesto(Base):
    """
    Modelo ORM para la tabla 'repuestos'.

    `stock_actual` es un total desnormalizado: la suma de `cantidad` de todas
    las filas de `repuesto_ubicaciones` del repuesto. Se recalcula en la misma
    transacción que modifica dichas filas.
    """
    __tablename__ = "repuestos"
    __table_args__ = (
        CheckConstraint("stock_minimo >= 0", name="stock_minimo_no_negativo"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    codigo: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    nombre: Mapped[str] = mapped_column(String(200), index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    marca: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    modelo: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    numero_parte: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    categoria: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    stock_minimo: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    stock_actual: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ubicaciones: Mapped[List["RepuestoUbicacion"]] = relationship(
        "RepuestoUbicacion",
        back_populates="repuesto",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    equipos: Mapped[List["RepuestoEquipo"]] = relationship(
        "RepuestoEquipo",
        back_populates="repuesto",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock_minimo > 0 and self.stock_actual <= self.stock_minimo

    def __repr__(self) -> str:
        return f"<Repuesto(id={self.id}, codigo='{self.codigo}', stock_actual={self.stock_actual})>"

"""Schemas de referencia compactos compartidos entre entidades."""
import uuid
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class NodoSimple(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str


class NodoUbicacion(NodoSimple):
    """Nodo de la jerarquía con su tipo y su ruta desde la ubicación raíz."""
    tipo_ubicacion: str = Field(..., alias="tipo")
    ruta: str


class NodoArbol(CamelModel):
    id: uuid.UUID
    nombre: str
    codigo: str
    tipo: str = Field(..., alias="type")
    children: List["NodoArbol"] = []


class RepuestoSimple(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    stock_actual: int


class EquipoSimple(CamelModel):
    id: uuid.UUID
    codigo: str
    sap: Optional[str] = None
    nombre: str


NodoArbol.model_rebuild()

import uuid
from typing import Dict, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple

class CajoncitoCreate(CamelModel):
    """Si `codigo` se omite se asigna el siguiente `CAJ-NNN` del organizador."""
    codigo: Optional[str] = Field(None, max_length=50)
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class CajoncitoUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class CajoncitoRead(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    organizador_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class CajoncitoDetalle(CajoncitoRead):
    """Cajoncito con su organizador y la ruta completa en la jerarquía."""
    organizador: NodoSimple
    ruta: str

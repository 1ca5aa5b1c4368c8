import uuid
from typing import Dict, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple

class DivisionCreate(CamelModel):
    """Si `codigo` se omite se asigna el siguiente `DIV-NNN` del cajón."""
    codigo: Optional[str] = Field(None, max_length=50)
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class DivisionUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class DivisionRead(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    cajon_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class DivisionDetalle(DivisionRead):
    cajon: NodoSimple
    ruta: str

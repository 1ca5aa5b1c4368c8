import uuid
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple
from app.schemas.division import DivisionRead

class CajonCreate(CamelModel):
    """Si `codigo` se omite se asigna el siguiente `CAJ-NNN` del contenedor."""
    codigo: Optional[str] = Field(None, max_length=50)
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class CajonUpdate(UpdateModel):
    """El contenedor (armario o estantería) no puede cambiarse."""
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class CajonRead(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    armario_id: Optional[uuid.UUID] = None
    estanteria_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class CajonDetalle(CajonRead):
    armario: Optional[NodoSimple] = None
    estanteria: Optional[NodoSimple] = None
    divisiones: List[DivisionRead] = []
    ruta: str

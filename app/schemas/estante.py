import uuid
from typing import Dict, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple

class EstanteCreate(CamelModel):
    """Si `codigo` se omite se asigna el siguiente `EST-NNN` de la estantería."""
    codigo: Optional[str] = Field(None, max_length=50)
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class EstanteUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class EstanteRead(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    estanteria_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class EstanteDetalle(EstanteRead):
    estanteria: NodoSimple
    ruta: str

import uuid
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple

class EstanteriaBase(CamelModel):
    codigo: str = Field(..., min_length=1, max_length=50, description="Código de la estantería, único dentro de la ubicación")
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class EstanteriaCreate(EstanteriaBase):
    pass

class EstanteriaUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class EstanteriaRead(EstanteriaBase):
    id: uuid.UUID
    ubicacion_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class EstanteriaDetalle(EstanteriaRead):
    ubicacion: NodoSimple
    estantes: List[NodoSimple] = []
    cajones: List[NodoSimple] = []
    organizadores: List[NodoSimple] = []

import uuid
from typing import Dict, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple

class ArmarioBase(CamelModel):
    codigo: str = Field(..., min_length=1, max_length=50, description="Código del armario, único dentro de la ubicación")
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class ArmarioCreate(ArmarioBase):
    pass

class ArmarioUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class ArmarioRead(ArmarioBase):
    id: uuid.UUID
    ubicacion_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class ArmarioDetalle(ArmarioRead):
    ubicacion: NodoSimple

import uuid
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import RepuestoSimple

class EquipoRepuestoIn(CamelModel):
    repuesto_id: uuid.UUID
    cantidad: int = Field(1, ge=1, le=9999)

# --- Schema Base ---
class EquipoBase(CamelModel):
    """Campos base que definen un equipo."""
    codigo: str = Field(..., min_length=1, max_length=50, description="Código interno único del equipo")
    sap: Optional[str] = Field(None, max_length=50, description="Código SAP, único si se indica")
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)
    marca: Optional[str] = Field(None, max_length=100)
    modelo: Optional[str] = Field(None, max_length=100)
    numero_serie: Optional[str] = Field(None, max_length=100)

# --- Schema para Creación ---
class EquipoCreate(EquipoBase):
    repuestos: List[EquipoRepuestoIn] = []

# --- Schema para Actualización ---
class EquipoUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    sap: Optional[str] = Field(None, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)
    marca: Optional[str] = Field(None, max_length=100)
    modelo: Optional[str] = Field(None, max_length=100)
    numero_serie: Optional[str] = Field(None, max_length=100)

class EquipoRepuestoCreate(EquipoRepuestoIn):
    pass

class EquipoRepuestoRead(CamelModel):
    id: uuid.UUID
    cantidad: int
    repuesto: RepuestoSimple

# --- Schemas para Respuesta API ---
class EquipoRead(EquipoBase):
    id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class EquipoDetalle(EquipoRead):
    repuestos: List[EquipoRepuestoRead] = []

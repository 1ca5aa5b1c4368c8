import uuid
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.armario import ArmarioRead
from app.schemas.estanteria import EstanteriaRead

# --- Schema Base ---
class UbicacionBase(CamelModel):
    """Campos base que definen una ubicación física (sede, bodega, taller)."""
    nombre: str = Field(..., min_length=1, max_length=100, description="Nombre de la ubicación")
    descripcion: Optional[str] = Field(None, max_length=500, description="Descripción de la ubicación")

# --- Schema para Creación ---
class UbicacionCreate(UbicacionBase):
    """Si `codigo` se omite o está vacío se genera automáticamente."""
    codigo: Optional[str] = Field(None, max_length=50, description="Código único de la ubicación")
    is_active: bool = True

# --- Schema para Actualización ---
class UbicacionUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre", "is_active")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

# --- Schema para Respuesta API ---
class UbicacionRead(UbicacionBase):
    id: uuid.UUID
    codigo: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class UbicacionDetalle(UbicacionRead):
    """Ubicación con sus armarios y estanterías."""
    armarios: List[ArmarioRead] = []
    estanterias: List[EstanteriaRead] = []

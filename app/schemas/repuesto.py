import uuid
from typing import List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.enums import TipoUbicacionRepuestoEnum
from app.schemas.referencias import EquipoSimple, NodoUbicacion, RepuestoSimple

# --- Ubicación indicada al crear/editar un repuesto ---
class UbicacionCantidad(CamelModel):
    tipo: TipoUbicacionRepuestoEnum
    id: uuid.UUID
    cantidad: int = Field(..., ge=1, le=9999)

# --- Schema Base ---
class RepuestoBase(CamelModel):
    """Campos base que definen un repuesto."""
    codigo: str = Field(..., min_length=1, max_length=50, description="Código único del repuesto")
    nombre: str = Field(..., min_length=1, max_length=200)
    descripcion: Optional[str] = Field(None, max_length=1000)
    marca: Optional[str] = Field(None, max_length=100)
    modelo: Optional[str] = Field(None, max_length=100)
    numero_parte: Optional[str] = Field(None, max_length=100)
    categoria: Optional[str] = Field(None, max_length=100)
    stock_minimo: int = Field(0, ge=0, le=9999, description="Umbral para considerar el stock bajo")

# --- Schema para Creación ---
class RepuestoCreate(RepuestoBase):
    """El stock inicial es la suma de las cantidades de `ubicaciones`."""
    ubicaciones: List[UbicacionCantidad] = []
    equipos: List[uuid.UUID] = []

# --- Schema para Actualización ---
class RepuestoUpdate(UpdateModel):
    """
    Actualización parcial. Si se envían `ubicaciones` o `equipos`, reemplazan
    por completo las listas anteriores.
    """
    campos_no_nulos = ("codigo", "nombre", "stock_minimo", "ubicaciones", "equipos")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=200)
    descripcion: Optional[str] = Field(None, max_length=1000)
    marca: Optional[str] = Field(None, max_length=100)
    modelo: Optional[str] = Field(None, max_length=100)
    numero_parte: Optional[str] = Field(None, max_length=100)
    categoria: Optional[str] = Field(None, max_length=100)
    stock_minimo: Optional[int] = Field(None, ge=0, le=9999)
    ubicaciones: Optional[List[UbicacionCantidad]] = None
    equipos: Optional[List[uuid.UUID]] = None

# --- Asociaciones ---
class RepuestoUbicacionCreate(CamelModel):
    """Debe indicarse exactamente uno de los campos de ubicación."""
    cantidad: int = Field(..., ge=1, le=9999)
    armario_id: Optional[uuid.UUID] = None
    estanteria_id: Optional[uuid.UUID] = None
    estante_id: Optional[uuid.UUID] = None
    cajon_id: Optional[uuid.UUID] = None
    division_id: Optional[uuid.UUID] = None
    cajoncito_id: Optional[uuid.UUID] = None

class RepuestoUbicacionUpdate(CamelModel):
    cantidad: int = Field(..., ge=1, le=9999)

class RepuestoUbicacionRead(CamelModel):
    id: uuid.UUID
    repuesto_id: uuid.UUID
    cantidad: int
    ubicacion_tipo: Optional[str] = Field(None, alias="tipo")
    ubicacion_id: Optional[uuid.UUID] = None
    ubicacion: Optional[NodoUbicacion] = None
    created_at: datetime

class RepuestoEquiposIn(CamelModel):
    equipo_ids: List[uuid.UUID] = Field(..., min_length=1)

class RepuestoEquipoRead(CamelModel):
    id: uuid.UUID
    cantidad: int
    equipo: EquipoSimple

# --- Schemas para Respuesta API ---
class RepuestoRead(RepuestoBase):
    id: uuid.UUID
    stock_actual: int
    is_low_stock: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

class RepuestoDetalle(RepuestoRead):
    ubicaciones: List[RepuestoUbicacionRead] = []
    equipos: List[RepuestoEquipoRead] = []

class CodigoDisponibilidad(CamelModel):
    is_available: bool
    existing_repuesto: Optional[RepuestoSimple] = None

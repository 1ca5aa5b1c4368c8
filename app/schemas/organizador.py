import uuid
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.referencias import NodoSimple
from app.schemas.cajoncito import CajoncitoRead

class OrganizadorCreate(CamelModel):
    """
    Si `codigo` se omite se asigna el siguiente `ORG-NNN` del contenedor.
    `cantidad_cajoncitos` crea en la misma operación los cajoncitos CAJ-001..N.
    """
    codigo: Optional[str] = Field(None, max_length=50)
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)
    cantidad_cajoncitos: Optional[int] = Field(None, ge=1, le=50, description="Cajoncitos a crear automáticamente")

class OrganizadorUpdate(UpdateModel):
    campos_no_nulos = ("codigo", "nombre")

    codigo: Optional[str] = Field(None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=500)

class OrganizadorRead(CamelModel):
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    armario_id: Optional[uuid.UUID] = None
    estanteria_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    conteos: Dict[str, int] = Field(default_factory=dict, alias="_count")

class OrganizadorDetalle(OrganizadorRead):
    armario: Optional[NodoSimple] = None
    estanteria: Optional[NodoSimple] = None
    cajoncitos: List[CajoncitoRead] = []
    ruta: str

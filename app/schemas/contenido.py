import uuid
from typing import List, Optional

from app.schemas.common import CamelModel

class ItemContenido(CamelModel):
    """Repuesto o componente guardado en la ubicación consultada (o en sus descendientes)."""
    item_type: str
    id: uuid.UUID
    codigo: str
    nombre: str
    descripcion: Optional[str] = None
    categoria: Optional[str] = None
    cantidad: int
    stock_actual: int
    location_id: uuid.UUID
    location_type: str
    location_path: str

class ResumenContenido(CamelModel):
    total_items: int
    repuestos_count: int
    componentes_count: int
    total_pages: int
    current_page: int

class ContenidoUbicacion(CamelModel):
    location_id: uuid.UUID
    location_type: str
    item_type: str
    include_children: bool
    items: List[ItemContenido] = []
    summary: ResumenContenido

import uuid
from typing import List, Optional

from app.schemas.common import CamelModel

class StockUbicacion(CamelModel):
    location_id: uuid.UUID
    location_type: str
    location_name: str
    location_code: str
    quantity: int
    location_path: str

class StockItem(CamelModel):
    item_id: uuid.UUID
    item_type: str
    item_name: str
    item_code: str
    total_stock: int
    locations: List[StockUbicacion] = []
    low_stock_threshold: Optional[int] = None
    is_low_stock: bool

class StockRecalculo(CamelModel):
    total_repuestos: int
    total_componentes: int
    low_stock_repuestos: int

class ResumenStock(CamelModel):
    total_repuestos: int = 0
    total_componentes: int = 0
    low_stock_repuestos: int = 0
    total_items: int
    total_pages: int
    current_page: int
    item_type: str
    filter: str

class ListadoStock(CamelModel):
    items: List[StockItem] = []
    summary: ResumenStock

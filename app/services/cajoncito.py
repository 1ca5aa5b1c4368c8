import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.cajoncito import Cajoncito
from app.models.componente_ubicacion import ComponenteUbicacion
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.cajoncito import CajoncitoCreate, CajoncitoUpdate

from .contenedor import ContenedorService

logger = logging.getLogger(__name__)

MAX_CAJONCITOS_POR_ORGANIZADOR = 50


class CajoncitoService(ContenedorService[Cajoncito, CajoncitoCreate, CajoncitoUpdate]):
    not_found_message = "Cajoncito no encontrado"
    parent_fields = ("organizador_id",)
    prefijo = "CAJ"
    max_por_padre = MAX_CAJONCITOS_POR_ORGANIZADOR
    max_mensaje = f"No se pueden crear más de {MAX_CAJONCITOS_POR_ORGANIZADOR} cajoncitos por organizador"
    duplicado_mensaje = "El código de cajoncito ya existe en este organizador"
    no_eliminable_mensaje = "No se puede eliminar el cajoncito porque contiene componentes o repuestos"

    def hijos(self):
        return (
            (ComponenteUbicacion, "cajoncito_id"),
            (RepuestoUbicacion, "cajoncito_id"),
        )

    def search(self, db: Session, *, search: Optional[str] = None, limit: int = 50) -> List[Cajoncito]:
        """Busca cajoncitos por código o nombre (máximo `limit` resultados)."""
        statement = select(Cajoncito).order_by(Cajoncito.codigo, Cajoncito.nombre)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(Cajoncito.codigo.ilike(pattern), Cajoncito.nombre.ilike(pattern)))
        return list(db.execute(statement.limit(limit)).scalars().all())


cajoncito_service = CajoncitoService(Cajoncito)

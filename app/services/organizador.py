import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.organizador import Organizador
from app.models.cajoncito import Cajoncito
from app.schemas.organizador import OrganizadorCreate, OrganizadorUpdate

from .contenedor import ContenedorService

logger = logging.getLogger(__name__)


class OrganizadorService(ContenedorService[Organizador, OrganizadorCreate, OrganizadorUpdate]):
    """Organizadores de un armario o de una estantería. Códigos ORG-NNN por contenedor."""
    not_found_message = "Organizador no encontrado"
    parent_fields = ("armario_id", "estanteria_id")
    prefijo = "ORG"
    duplicado_mensaje = "El código de organizador ya existe en este contenedor"
    no_eliminable_mensaje = "No se puede eliminar el organizador porque contiene cajoncitos"
    campos_extra = {"cantidad_cajoncitos"}

    def hijos(self):
        return ((Cajoncito, "organizador_id"),)

    def create_in(
        self, db: Session, *, parent_field: str, parent_id: Any, obj_in: OrganizadorCreate
    ) -> Organizador:
        """
        Crea el organizador y, si se indica `cantidad_cajoncitos`, sus cajoncitos
        CAJ-001..N en la misma transacción. NO realiza db.commit().
        """
        organizador = super().create_in(db, parent_field=parent_field, parent_id=parent_id, obj_in=obj_in)
        if obj_in.cantidad_cajoncitos:
            db.flush()
            for i in range(1, obj_in.cantidad_cajoncitos + 1):
                db.add(Cajoncito(
                    codigo=f"CAJ-{i:03d}",
                    nombre=f"Cajoncito {i}",
                    organizador_id=organizador.id,
                ))
            logger.info(f"{obj_in.cantidad_cajoncitos} cajoncitos preparados para el organizador '{organizador.codigo}'.")
        return organizador


organizador_service = OrganizadorService(Organizador)

from app.models.cajon import Cajon
from app.models.division import Division
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.cajon import CajonCreate, CajonUpdate

from .contenedor import ContenedorService


class CajonService(ContenedorService[Cajon, CajonCreate, CajonUpdate]):
    """Cajones de un armario o de una estantería. Códigos CAJ-NNN por contenedor."""
    not_found_message = "Cajón no encontrado"
    parent_fields = ("armario_id", "estanteria_id")
    prefijo = "CAJ"
    duplicado_mensaje = "El código de cajón ya existe en este contenedor"
    no_eliminable_mensaje = "No se puede eliminar el cajón porque contiene divisiones o repuestos asociados"

    def hijos(self):
        return (
            (Division, "cajon_id"),
            (RepuestoUbicacion, "cajon_id"),
        )


cajon_service = CajonService(Cajon)

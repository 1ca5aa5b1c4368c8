from app.models.estanteria import Estanteria
from app.models.estante import Estante
from app.models.cajon import Cajon
from app.models.organizador import Organizador
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.estanteria import EstanteriaCreate, EstanteriaUpdate

from .contenedor import ContenedorService


class EstanteriaService(ContenedorService[Estanteria, EstanteriaCreate, EstanteriaUpdate]):
    """Estanterías de una ubicación."""
    not_found_message = "Estantería no encontrada"
    parent_fields = ("ubicacion_id",)
    duplicado_mensaje = "El código de estantería ya existe"
    no_eliminable_mensaje = (
        "No se puede eliminar la estantería porque contiene cajones, estantes, organizadores o repuestos asociados"
    )

    def hijos(self):
        return (
            (Cajon, "estanteria_id"),
            (Estante, "estanteria_id"),
            (Organizador, "estanteria_id"),
            (RepuestoUbicacion, "estanteria_id"),
        )


estanteria_service = EstanteriaService(Estanteria)

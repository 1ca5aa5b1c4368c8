from app.models.armario import Armario
from app.models.cajon import Cajon
from app.models.organizador import Organizador
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.armario import ArmarioCreate, ArmarioUpdate

from .contenedor import ContenedorService


class ArmarioService(ContenedorService[Armario, ArmarioCreate, ArmarioUpdate]):
    """Armarios de una ubicación."""
    not_found_message = "Armario no encontrado"
    parent_fields = ("ubicacion_id",)
    duplicado_mensaje = "El código de armario ya existe"
    no_eliminable_mensaje = "No se puede eliminar el armario porque contiene cajones, organizadores o repuestos asociados"

    def hijos(self):
        return (
            (Cajon, "armario_id"),
            (Organizador, "armario_id"),
            (RepuestoUbicacion, "armario_id"),
        )


armario_service = ArmarioService(Armario)

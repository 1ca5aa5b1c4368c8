from app.models.estante import Estante
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.estante import EstanteCreate, EstanteUpdate

from .contenedor import ContenedorService


class EstanteService(ContenedorService[Estante, EstanteCreate, EstanteUpdate]):
    not_found_message = "Estante no encontrado"
    parent_fields = ("estanteria_id",)
    prefijo = "EST"
    duplicado_mensaje = "El código de estante ya existe en esta estantería"
    no_eliminable_mensaje = "No se puede eliminar el estante porque contiene repuestos asociados"

    def hijos(self):
        return ((RepuestoUbicacion, "estante_id"),)


estante_service = EstanteService(Estante)

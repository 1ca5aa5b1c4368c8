from app.models.division import Division
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.division import DivisionCreate, DivisionUpdate

from .contenedor import ContenedorService

MAX_DIVISIONES_POR_CAJON = 20


class DivisionService(ContenedorService[Division, DivisionCreate, DivisionUpdate]):
    not_found_message = "División no encontrada"
    parent_fields = ("cajon_id",)
    prefijo = "DIV"
    max_por_padre = MAX_DIVISIONES_POR_CAJON
    max_mensaje = f"No se pueden crear más de {MAX_DIVISIONES_POR_CAJON} divisiones por cajón"
    duplicado_mensaje = "El código de división ya existe en este cajón"
    no_eliminable_mensaje = "No se puede eliminar la división porque contiene repuestos asociados"

    def hijos(self):
        return ((RepuestoUbicacion, "division_id"),)


division_service = DivisionService(Division)

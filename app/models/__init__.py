from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import column_property

from .armario import Armario
from .cajon import Cajon
from .cajoncito import Cajoncito
from .componente import Componente
from .componente_ubicacion import ComponenteUbicacion
from .division import Division
from .equipo import Equipo
from .estante import Estante
from .estanteria import Estanteria
from .organizador import Organizador
from .repuesto import Repuesto
from .repuesto_equipo import RepuestoEquipo
from .repuesto_ubicacion import RepuestoUbicacion
from .ubicacion import Ubicacion
from .usuario import Usuario


def _conteo(padre: Any, hijo: Any, fk: Any) -> Any:
    """Subconsulta correlacionada con el número de filas de `hijo` que apuntan a `padre`."""
    return column_property(
        select(func.count())
        .select_from(hijo)
        .where(fk == padre.id)
        .correlate_except(hijo)
        .scalar_subquery()
    )


# Conteos de hijos para `_count`, calculados en la misma consulta que carga al padre
Ubicacion.num_armarios = _conteo(Ubicacion, Armario, Armario.ubicacion_id)
Ubicacion.num_estanterias = _conteo(Ubicacion, Estanteria, Estanteria.ubicacion_id)
Armario.num_cajones = _conteo(Armario, Cajon, Cajon.armario_id)
Armario.num_organizadores = _conteo(Armario, Organizador, Organizador.armario_id)
Armario.num_repuestos = _conteo(Armario, RepuestoUbicacion, RepuestoUbicacion.armario_id)
Estanteria.num_estantes = _conteo(Estanteria, Estante, Estante.estanteria_id)
Estanteria.num_cajones = _conteo(Estanteria, Cajon, Cajon.estanteria_id)
Estanteria.num_organizadores = _conteo(Estanteria, Organizador, Organizador.estanteria_id)
Estanteria.num_repuestos = _conteo(Estanteria, RepuestoUbicacion, RepuestoUbicacion.estanteria_id)
Estante.num_repuestos = _conteo(Estante, RepuestoUbicacion, RepuestoUbicacion.estante_id)
Cajon.num_divisiones = _conteo(Cajon, Division, Division.cajon_id)
Cajon.num_repuestos = _conteo(Cajon, RepuestoUbicacion, RepuestoUbicacion.cajon_id)
Division.num_repuestos = _conteo(Division, RepuestoUbicacion, RepuestoUbicacion.division_id)
Organizador.num_cajoncitos = _conteo(Organizador, Cajoncito, Cajoncito.organizador_id)
Cajoncito.num_componentes = _conteo(Cajoncito, ComponenteUbicacion, ComponenteUbicacion.cajoncito_id)
Cajoncito.num_repuestos = _conteo(Cajoncito, RepuestoUbicacion, RepuestoUbicacion.cajoncito_id)
Equipo.num_repuestos = _conteo(Equipo, RepuestoEquipo, RepuestoEquipo.equipo_id)


__all__ = [
    "Armario",
    "Cajon",
    "Cajoncito",
    "Componente",
    "ComponenteUbicacion",
    "Division",
    "Equipo",
    "Estante",
    "Estanteria",
    "Organizador",
    "Repuesto",
    "RepuestoEquipo",
    "RepuestoUbicacion",
    "Ubicacion",
    "Usuario",
]

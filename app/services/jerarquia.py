import logging
from typing import Any, Dict, List, Set, Tuple, Type
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models import (
    Armario, Cajon, Cajoncito, Division, Estante, Estanteria, Organizador, Ubicacion,
)
from app.schemas.referencias import NodoArbol

logger = logging.getLogger(__name__)

# Orden de búsqueda al resolver un ID de tipo desconocido
MODELOS_UBICACION: Dict[str, Type[Any]] = {
    "ubicacion": Ubicacion,
    "armario": Armario,
    "estanteria": Estanteria,
    "estante": Estante,
    "cajon": Cajon,
    "division": Division,
    "organizador": Organizador,
    "cajoncito": Cajoncito,
}

# Relaciones que llevan de cada nivel a sus hijos directos
HIJOS: Dict[str, Tuple[str, ...]] = {
    "ubicacion": ("armarios", "estanterias"),
    "armario": ("cajones", "organizadores"),
    "estanteria": ("estantes", "cajones", "organizadores"),
    "estante": (),
    "cajon": ("divisiones",),
    "division": (),
    "organizador": ("cajoncitos",),
    "cajoncito": (),
}

UBICACION_NO_ENCONTRADA = "Ubicación no encontrada"


def get_nodo_or_404(db: Session, tipo: str, id: UUID) -> Any:
    """Obtiene el nodo de tipo conocido o lanza 404."""
    modelo = MODELOS_UBICACION.get(tipo)
    nodo = db.get(modelo, id) if modelo else None
    if nodo is None:
        logger.warning(f"Nodo de jerarquía no encontrado: tipo={tipo}, id={id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=UBICACION_NO_ENCONTRADA)
    return nodo


def resolver_nodo(db: Session, id: UUID) -> Tuple[str, Any]:
    """Determina a qué nivel de la jerarquía pertenece `id`, probando cada tabla."""
    for tipo, modelo in MODELOS_UBICACION.items():
        nodo = db.get(modelo, id)
        if nodo is not None:
            return tipo, nodo
    logger.warning(f"ID {id} no corresponde a ningún nivel de la jerarquía.")
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=UBICACION_NO_ENCONTRADA)


def ids_descendientes(nodo: Any) -> Dict[str, Set[UUID]]:
    """
    IDs del nodo y de todos sus descendientes, agrupados por tipo.
    """
    resultado: Dict[str, Set[UUID]] = {tipo: set() for tipo in MODELOS_UBICACION}
    pendientes = [nodo]
    while pendientes:
        actual = pendientes.pop()
        resultado[actual.tipo_ubicacion].add(actual.id)
        for relacion in HIJOS[actual.tipo_ubicacion]:
            pendientes.extend(getattr(actual, relacion))
    return resultado


def _nodo_arbol(nodo: Any) -> NodoArbol:
    children = [
        _nodo_arbol(hijo)
        for relacion in HIJOS[nodo.tipo_ubicacion]
        for hijo in getattr(nodo, relacion)
    ]
    return NodoArbol(id=nodo.id, nombre=nodo.nombre, codigo=nodo.codigo, tipo=nodo.tipo_ubicacion, children=children)


def arbol(db: Session) -> List[NodoArbol]:
    """Árbol completo de las ubicaciones activas."""
    statement = (
        select(Ubicacion)
        .where(Ubicacion.is_active.is_(True))
        .order_by(Ubicacion.codigo)
        .options(
            selectinload(Ubicacion.armarios).selectinload(Armario.cajones).selectinload(Cajon.divisiones),
            selectinload(Ubicacion.armarios).selectinload(Armario.organizadores).selectinload(Organizador.cajoncitos),
            selectinload(Ubicacion.estanterias).selectinload(Estanteria.estantes),
            selectinload(Ubicacion.estanterias).selectinload(Estanteria.cajones).selectinload(Cajon.divisiones),
            selectinload(Ubicacion.estanterias).selectinload(Estanteria.organizadores).selectinload(Organizador.cajoncitos),
        )
    )
    ubicaciones = db.execute(statement).scalars().all()
    logger.debug(f"Construyendo árbol de jerarquía para {len(ubicaciones)} ubicaciones.")
    return [_nodo_arbol(u) for u in ubicaciones]


def listar_por_tipo(db: Session, tipo: str) -> List[Any]:
    """Lista plana de todos los nodos de un nivel, ordenados por código."""
    modelo = MODELOS_UBICACION[tipo]
    statement = select(modelo).order_by(modelo.codigo, modelo.nombre)
    return list(db.execute(statement).scalars().all())

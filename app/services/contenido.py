import logging
import math
from typing import Dict, List, Set
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.componente import Componente
from app.models.componente_ubicacion import ComponenteUbicacion
from app.models.repuesto import Repuesto
from app.models.repuesto_ubicacion import LOCATION_COLUMNS, RepuestoUbicacion
from app.schemas.contenido import ContenidoUbicacion, ItemContenido, ResumenContenido

from .jerarquia import MODELOS_UBICACION, ids_descendientes, resolver_nodo

logger = logging.getLogger(__name__)


class ContenidoService:
    """Repuestos y componentes guardados en cualquier nodo de la jerarquía."""

    def _repuestos(self, db: Session, ids: Dict[str, Set[UUID]]) -> List[ItemContenido]:
        condiciones = [
            getattr(RepuestoUbicacion, columna).in_(ids[tipo])
            for tipo, columna in LOCATION_COLUMNS.items()
            if ids[tipo]
        ]
        if not condiciones:
            return []
        statement = (
            select(RepuestoUbicacion)
            .join(Repuesto, Repuesto.id == RepuestoUbicacion.repuesto_id)
            .where(Repuesto.is_active.is_(True), or_(*condiciones))
            .order_by(Repuesto.codigo, RepuestoUbicacion.id)
        )
        items = []
        for asociacion in db.execute(statement).scalars().all():
            repuesto = asociacion.repuesto
            nodo = asociacion.ubicacion
            items.append(ItemContenido(
                item_type="repuesto",
                id=repuesto.id,
                codigo=repuesto.codigo,
                nombre=repuesto.nombre,
                descripcion=repuesto.descripcion,
                categoria=repuesto.categoria,
                cantidad=asociacion.cantidad,
                stock_actual=repuesto.stock_actual,
                location_id=nodo.id,
                location_type=nodo.tipo_ubicacion,
                location_path=nodo.ruta,
            ))
        return items

    def _componentes(self, db: Session, ids: Dict[str, Set[UUID]]) -> List[ItemContenido]:
        if not ids["cajoncito"]:
            return []
        statement = (
            select(ComponenteUbicacion)
            .join(Componente, Componente.id == ComponenteUbicacion.componente_id)
            .where(Componente.is_active.is_(True), ComponenteUbicacion.cajoncito_id.in_(ids["cajoncito"]))
            .order_by(Componente.categoria, Componente.descripcion, ComponenteUbicacion.id)
        )
        items = []
        for asociacion in db.execute(statement).scalars().all():
            componente = asociacion.componente
            cajoncito = asociacion.cajoncito
            items.append(ItemContenido(
                item_type="componente",
                id=componente.id,
                codigo=componente.codigo,
                nombre=componente.descripcion,
                descripcion=componente.descripcion,
                categoria=componente.categoria,
                cantidad=asociacion.cantidad,
                stock_actual=componente.stock_actual,
                location_id=cajoncito.id,
                location_type=cajoncito.tipo_ubicacion,
                location_path=cajoncito.ruta,
            ))
        return items

    def contenido_ubicacion(
        self,
        db: Session,
        *,
        location_id: UUID,
        item_type: str = "all",
        include_children: bool = True,
        page: int = 1,
        limit: int = 50,
    ) -> ContenidoUbicacion:
        tipo, nodo = resolver_nodo(db, location_id)
        if include_children:
            ids = ids_descendientes(nodo)
        else:
            ids = {t: set() for t in MODELOS_UBICACION}
            ids[tipo].add(nodo.id)

        repuestos = self._repuestos(db, ids) if item_type in ("repuestos", "all") else []
        componentes = self._componentes(db, ids) if item_type in ("componentes", "all") else []
        items = repuestos + componentes
        logger.debug(f"Contenido de {tipo} {location_id}: {len(repuestos)} repuestos, {len(componentes)} componentes.")

        inicio = (page - 1) * limit
        return ContenidoUbicacion(
            location_id=nodo.id,
            location_type=tipo,
            item_type=item_type,
            include_children=include_children,
            items=items[inicio:inicio + limit],
            summary=ResumenContenido(
                total_items=len(items),
                repuestos_count=len(repuestos),
                componentes_count=len(componentes),
                total_pages=math.ceil(len(items) / limit) if limit else 0,
                current_page=page,
            ),
        )


contenido_service = ContenidoService()

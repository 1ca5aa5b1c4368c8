import logging
import math
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.componente import Componente
from app.models.repuesto import Repuesto
from app.models.repuesto_ubicacion import RepuestoUbicacion
from app.schemas.stock import ListadoStock, ResumenStock, StockItem, StockRecalculo, StockUbicacion

logger = logging.getLogger(__name__)


def _stock_ubicacion(nodo, cantidad: int) -> StockUbicacion:
    return StockUbicacion(
        location_id=nodo.id,
        location_type=nodo.tipo_ubicacion,
        location_name=nodo.nombre,
        location_code=nodo.codigo,
        quantity=cantidad,
        location_path=nodo.ruta,
    )


class StockService:
    """
    Cálculo del stock distribuido de repuestos y componentes.

    El stock de un repuesto se guarda desnormalizado en `repuestos.stock_actual`;
    el de un componente siempre se calcula sumando sus filas por cajoncito.
    """

    def recalcular_stock_repuesto(self, db: Session, *, repuesto: Repuesto) -> int:
        """
        Reescribe `stock_actual` con la suma de las cantidades por ubicación.
        Hace flush para que la suma vea los cambios pendientes. NO realiza db.commit().
        """
        db.flush()
        total = db.execute(
            select(func.coalesce(func.sum(RepuestoUbicacion.cantidad), 0))
            .where(RepuestoUbicacion.repuesto_id == repuesto.id)
        ).scalar_one()
        if repuesto.stock_actual != total:
            logger.info(f"Stock del repuesto '{repuesto.codigo}' actualizado: {repuesto.stock_actual} -> {total}")
        repuesto.stock_actual = total
        db.add(repuesto)
        return total

    def calcular_stock_repuesto(
        self, db: Session, *, repuesto_id: UUID, include_inactive: bool = False, include_zero: bool = False
    ) -> StockItem:
        repuesto = db.get(Repuesto, repuesto_id)
        if not repuesto or (not repuesto.is_active and not include_inactive):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Repuesto no encontrado")
        return self._stock_item_repuesto(repuesto, include_zero=include_zero)

    def _stock_item_repuesto(self, repuesto: Repuesto, *, include_zero: bool = False) -> StockItem:
        locations = [
            _stock_ubicacion(asociacion.ubicacion, asociacion.cantidad)
            for asociacion in repuesto.ubicaciones
            if asociacion.ubicacion is not None and (include_zero or asociacion.cantidad > 0)
        ]
        total = sum(loc.quantity for loc in locations)
        return StockItem(
            item_id=repuesto.id,
            item_type="repuesto",
            item_name=repuesto.nombre,
            item_code=repuesto.codigo,
            total_stock=total,
            locations=locations,
            low_stock_threshold=repuesto.stock_minimo,
            is_low_stock=repuesto.stock_minimo > 0 and total <= repuesto.stock_minimo,
        )

    def calcular_stock_componente(
        self, db: Session, *, componente_id: UUID, include_inactive: bool = False, include_zero: bool = False
    ) -> StockItem:
        componente = db.get(Componente, componente_id)
        if not componente or (not componente.is_active and not include_inactive):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Componente no encontrado")
        return self._stock_item_componente(componente, include_zero=include_zero)

    def _stock_item_componente(self, componente: Componente, *, include_zero: bool = False) -> StockItem:
        locations = [
            _stock_ubicacion(asociacion.cajoncito, asociacion.cantidad)
            for asociacion in componente.ubicaciones
            if include_zero or asociacion.cantidad > 0
        ]
        total = sum(loc.quantity for loc in locations)
        return StockItem(
            item_id=componente.id,
            item_type="componente",
            item_name=componente.descripcion,
            item_code=componente.codigo,
            total_stock=total,
            locations=locations,
            low_stock_threshold=componente.stock_minimo,
            is_low_stock=componente.stock_minimo > 0 and total <= componente.stock_minimo,
        )

    def _repuestos(self, db: Session, *, include_inactive: bool) -> List[Repuesto]:
        statement = select(Repuesto).order_by(Repuesto.codigo)
        if not include_inactive:
            statement = statement.where(Repuesto.is_active.is_(True))
        return list(db.execute(statement).scalars().all())

    def _componentes(self, db: Session, *, include_inactive: bool) -> List[Componente]:
        statement = select(Componente).order_by(Componente.categoria, Componente.descripcion)
        if not include_inactive:
            statement = statement.where(Componente.is_active.is_(True))
        return list(db.execute(statement).scalars().all())

    def bajo_stock(
        self, db: Session, *, include_inactive: bool = False, include_zero: bool = False
    ) -> List[StockItem]:
        """Repuestos con umbral definido cuyo stock total no lo supera."""
        repuestos = [r for r in self._repuestos(db, include_inactive=include_inactive) if r.stock_minimo > 0]
        items = [self._stock_item_repuesto(r, include_zero=include_zero) for r in repuestos]
        return [item for item in items if item.is_low_stock]

    def listar(
        self,
        db: Session,
        *,
        item_type: str = "all",
        low_stock: bool = False,
        include_inactive: bool = False,
        include_zero: bool = False,
        page: int = 1,
        limit: int = 50,
    ) -> ListadoStock:
        """Stock de todos los ítems, paginado en memoria."""
        if low_stock:
            items = self.bajo_stock(db, include_inactive=include_inactive, include_zero=include_zero)
            resumen = {
                "total_repuestos": len(items),
                "low_stock_repuestos": len(items),
                "item_type": "repuesto",
                "filter": "low-stock",
            }
        else:
            repuestos: List[StockItem] = []
            componentes: List[StockItem] = []
            if item_type in ("repuesto", "all"):
                repuestos = [
                    self._stock_item_repuesto(r, include_zero=include_zero)
                    for r in self._repuestos(db, include_inactive=include_inactive)
                ]
            if item_type in ("componente", "all"):
                componentes = [
                    self._stock_item_componente(c, include_zero=include_zero)
                    for c in self._componentes(db, include_inactive=include_inactive)
                ]
            items = repuestos + componentes
            resumen = {
                "total_repuestos": len(repuestos),
                "total_componentes": len(componentes),
                "low_stock_repuestos": sum(1 for r in repuestos if r.is_low_stock),
                "item_type": item_type,
                "filter": "all",
            }

        inicio = (page - 1) * limit
        return ListadoStock(
            items=items[inicio:inicio + limit],
            summary=ResumenStock(
                total_items=len(items),
                total_pages=math.ceil(len(items) / limit) if limit else 0,
                current_page=page,
                **resumen,
            ),
        )

    def recalcular_todo(self, db: Session, *, item_type: Optional[str] = "all") -> StockRecalculo:
        """
        Recalcula y persiste `stock_actual` de todos los repuestos.
        NO realiza db.commit().
        """
        logger.warning("Recalculando el stock de todos los repuestos.")
        total_repuestos = 0
        bajo = 0
        if item_type in ("repuesto", "all"):
            for repuesto in self._repuestos(db, include_inactive=True):
                self.recalcular_stock_repuesto(db, repuesto=repuesto)
                total_repuestos += 1
                if repuesto.is_low_stock:
                    bajo += 1
        total_componentes = 0
        if item_type in ("componente", "all"):
            total_componentes = len(self._componentes(db, include_inactive=False))
        logger.info(f"Recalculo completado: {total_repuestos} repuestos ({bajo} con stock bajo), {total_componentes} componentes.")
        return StockRecalculo(
            total_repuestos=total_repuestos,
            total_componentes=total_componentes,
            low_stock_repuestos=bajo,
        )


stock_service = StockService()

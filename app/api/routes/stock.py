import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.models.usuario import Usuario as UsuarioModel
from app.schemas.common import ApiResponse
from app.schemas.stock import ListadoStock, StockItem, StockRecalculo
from app.services.stock import stock_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])

ITEM_TYPE_PATTERN = "^(repuesto|componente|all)$"


@router.get("",
            response_model=ApiResponse[ListadoStock],
            summary="Listar el stock de los ítems")
def read_stock(
    db: Session = Depends(deps.get_db),
    item_type: str = Query("all", alias="itemType", pattern=ITEM_TYPE_PATTERN),
    low_stock: bool = Query(False, alias="lowStock", description="Solo repuestos con stock bajo"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    include_zero: bool = Query(False, alias="includeZero", description="Incluye ubicaciones con cantidad 0"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> Any:
    listado = stock_service.listar(
        db, item_type=item_type, low_stock=low_stock, include_inactive=include_inactive,
        include_zero=include_zero, page=page, limit=limit,
    )
    return {"success": True, "data": listado}


@router.get("/low",
            response_model=ApiResponse[List[StockItem]],
            summary="Listar repuestos con stock bajo")
def read_low_stock(
    db: Session = Depends(deps.get_db),
    include_inactive: bool = Query(False, alias="includeInactive"),
) -> Any:
    """Repuestos con `stockMinimo` definido cuyo stock total no lo supera."""
    return {"success": True, "data": stock_service.bajo_stock(db, include_inactive=include_inactive)}


@router.post("/recalculate",
             response_model=ApiResponse[StockRecalculo],
             dependencies=[Depends(deps.require_stock_maintenance)],
             summary="Recalcular el stock de todos los repuestos")
def recalculate_stock(
    *,
    db: Session = Depends(deps.get_db),
    item_type: str = Query("all", alias="itemType", pattern=ITEM_TYPE_PATTERN),
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Reescribe `stockActual` de cada repuesto con la suma de sus ubicaciones.
    Requiere rol administrador o supervisor.
    """
    logger.warning(f"Usuario '{current_user.email}' solicitó el recalculo de stock ({item_type}).")
    try:
        resultado = stock_service.recalcular_todo(db, item_type=item_type)
        db.commit()
        return {"success": True, "data": resultado, "message": "Stock recalculado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado recalculando stock: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/{item_type}/{item_id}",
            response_model=ApiResponse[StockItem],
            summary="Obtener el stock de un ítem")
def read_item_stock(
    item_type: str,
    item_id: PyUUID,
    db: Session = Depends(deps.get_db),
    include_inactive: bool = Query(False, alias="includeInactive"),
    include_zero: bool = Query(False, alias="includeZero"),
) -> Any:
    """`item_type` es `repuesto` o `componente`."""
    if item_type == "repuesto":
        item = stock_service.calcular_stock_repuesto(
            db, repuesto_id=item_id, include_inactive=include_inactive, include_zero=include_zero
        )
    elif item_type == "componente":
        item = stock_service.calcular_stock_componente(
            db, componente_id=item_id, include_inactive=include_inactive, include_zero=include_zero
        )
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tipo de ítem inválido")
    return {"success": True, "data": item}

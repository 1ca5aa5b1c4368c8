import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas.cajoncito import CajoncitoDetalle, CajoncitoUpdate
from app.schemas.common import ApiResponse
from app.services.cajoncito import cajoncito_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("",
            response_model=ApiResponse[List[CajoncitoDetalle]],
            summary="Buscar Cajoncitos")
def search_cajoncitos(
    db: Session = Depends(deps.get_db),
    search: Optional[str] = Query(None, description="Texto a buscar en código o nombre"),
) -> Any:
    """Devuelve como máximo 50 cajoncitos, cada uno con su organizador y ruta."""
    cajoncitos = cajoncito_service.search(db, search=search)
    return {"success": True, "data": cajoncitos}


@router.get("/{cajoncito_id}",
            response_model=ApiResponse[CajoncitoDetalle],
            summary="Obtener un Cajoncito")
def read_cajoncito(cajoncito_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    cajoncito = cajoncito_service.get_or_404(db, id=cajoncito_id)
    return {"success": True, "data": cajoncito}


@router.put("/{cajoncito_id}",
            response_model=ApiResponse[CajoncitoDetalle],
            summary="Actualizar un Cajoncito")
def update_cajoncito(
    *,
    db: Session = Depends(deps.get_db),
    cajoncito_id: PyUUID,
    cajoncito_in: CajoncitoUpdate,
) -> Any:
    cajoncito = cajoncito_service.get_or_404(db, id=cajoncito_id)
    try:
        cajoncito = cajoncito_service.update(db, db_obj=cajoncito, obj_in=cajoncito_in)
        db.commit()
        db.refresh(cajoncito)
        return {"success": True, "data": cajoncito, "message": "Cajoncito actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando cajoncito {cajoncito_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{cajoncito_id}",
               response_model=ApiResponse,
               summary="Eliminar un Cajoncito vacío")
def delete_cajoncito(*, db: Session = Depends(deps.get_db), cajoncito_id: PyUUID) -> Any:
    try:
        cajoncito_service.remove(db, id=cajoncito_id)
        db.commit()
        return {"success": True, "message": "Cajoncito eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando cajoncito {cajoncito_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

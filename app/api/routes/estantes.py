import logging
from typing import Any
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas.common import ApiResponse
from app.schemas.estante import EstanteDetalle, EstanteUpdate
from app.services.estante import estante_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{estante_id}",
            response_model=ApiResponse[EstanteDetalle],
            summary="Obtener un Estante")
def read_estante(estante_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    estante = estante_service.get_or_404(db, id=estante_id)
    return {"success": True, "data": estante}


@router.put("/{estante_id}",
            response_model=ApiResponse[EstanteDetalle],
            summary="Actualizar un Estante")
def update_estante(
    *,
    db: Session = Depends(deps.get_db),
    estante_id: PyUUID,
    estante_in: EstanteUpdate,
) -> Any:
    estante = estante_service.get_or_404(db, id=estante_id)
    try:
        estante = estante_service.update(db, db_obj=estante, obj_in=estante_in)
        db.commit()
        db.refresh(estante)
        return {"success": True, "data": estante, "message": "Estante actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando estante {estante_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{estante_id}",
               response_model=ApiResponse,
               summary="Eliminar un Estante vacío")
def delete_estante(*, db: Session = Depends(deps.get_db), estante_id: PyUUID) -> Any:
    try:
        estante_service.remove(db, id=estante_id)
        db.commit()
        return {"success": True, "message": "Estante eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando estante {estante_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

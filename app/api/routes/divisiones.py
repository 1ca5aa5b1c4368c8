import logging
from typing import Any
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas.common import ApiResponse
from app.schemas.division import DivisionDetalle, DivisionUpdate
from app.services.division import division_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{division_id}",
            response_model=ApiResponse[DivisionDetalle],
            summary="Obtener una División")
def read_division(division_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    division = division_service.get_or_404(db, id=division_id)
    return {"success": True, "data": division}


@router.put("/{division_id}",
            response_model=ApiResponse[DivisionDetalle],
            summary="Actualizar una División")
def update_division(
    *,
    db: Session = Depends(deps.get_db),
    division_id: PyUUID,
    division_in: DivisionUpdate,
) -> Any:
    division = division_service.get_or_404(db, id=division_id)
    try:
        division = division_service.update(db, db_obj=division, obj_in=division_in)
        db.commit()
        db.refresh(division)
        return {"success": True, "data": division, "message": "División actualizada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando división {division_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{division_id}",
               response_model=ApiResponse,
               summary="Eliminar una División vacía")
def delete_division(*, db: Session = Depends(deps.get_db), division_id: PyUUID) -> Any:
    try:
        division_service.remove(db, id=division_id)
        db.commit()
        return {"success": True, "message": "División eliminada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando división {division_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

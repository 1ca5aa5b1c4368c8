import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.cajon import CajonDetalle, CajonUpdate
from app.schemas.common import ApiResponse
from app.schemas.division import DivisionCreate, DivisionRead
from app.services.cajon import cajon_service
from app.services.division import division_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{cajon_id}",
            response_model=ApiResponse[CajonDetalle],
            summary="Obtener un Cajón con sus divisiones")
def read_cajon(cajon_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    cajon = cajon_service.get_or_404(db, id=cajon_id)
    return {"success": True, "data": cajon}


@router.put("/{cajon_id}",
            response_model=ApiResponse[CajonDetalle],
            summary="Actualizar un Cajón")
def update_cajon(
    *,
    db: Session = Depends(deps.get_db),
    cajon_id: PyUUID,
    cajon_in: CajonUpdate,
) -> Any:
    """El contenedor del cajón no puede modificarse."""
    cajon = cajon_service.get_or_404(db, id=cajon_id)
    try:
        cajon = cajon_service.update(db, db_obj=cajon, obj_in=cajon_in)
        db.commit()
        db.refresh(cajon)
        return {"success": True, "data": cajon, "message": "Cajón actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando cajón {cajon_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{cajon_id}",
               response_model=ApiResponse,
               summary="Eliminar un Cajón vacío")
def delete_cajon(*, db: Session = Depends(deps.get_db), cajon_id: PyUUID) -> Any:
    try:
        cajon_service.remove(db, id=cajon_id)
        db.commit()
        return {"success": True, "message": "Cajón eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando cajón {cajon_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Divisiones del cajón ---

@router.get("/{cajon_id}/divisiones",
            response_model=ApiResponse[List[DivisionRead]],
            summary="Listar Divisiones de un Cajón")
def read_divisiones(cajon_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    cajon_service.get_or_404(db, id=cajon_id)
    divisiones = division_service.get_by_parent(db, parent_field="cajon_id", parent_id=cajon_id)
    return {"success": True, "data": divisiones}


@router.post("/{cajon_id}/divisiones",
             response_model=ApiResponse[DivisionRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear una División en un Cajón")
def create_division(
    *,
    db: Session = Depends(deps.get_db),
    cajon_id: PyUUID,
    division_in: DivisionCreate,
) -> Any:
    """Sin `codigo` se asigna el siguiente `DIV-NNN`. Máximo 20 divisiones por cajón."""
    cajon_service.get_or_404(db, id=cajon_id)
    try:
        division = division_service.create_in(db, parent_field="cajon_id", parent_id=cajon_id, obj_in=division_in)
        db.commit()
        db.refresh(division)
        logger.info(f"División '{division.codigo}' creada en cajón {cajon_id}.")
        return {"success": True, "data": division, "message": "División creada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear división: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=division_service.duplicado_mensaje)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando división: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

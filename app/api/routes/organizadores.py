import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.cajoncito import CajoncitoCreate, CajoncitoRead
from app.schemas.common import ApiResponse
from app.schemas.organizador import OrganizadorDetalle, OrganizadorUpdate
from app.services.cajoncito import cajoncito_service
from app.services.organizador import organizador_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{organizador_id}",
            response_model=ApiResponse[OrganizadorDetalle],
            summary="Obtener un Organizador con sus cajoncitos")
def read_organizador(organizador_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    organizador = organizador_service.get_or_404(db, id=organizador_id)
    return {"success": True, "data": organizador}


@router.put("/{organizador_id}",
            response_model=ApiResponse[OrganizadorDetalle],
            summary="Actualizar un Organizador")
def update_organizador(
    *,
    db: Session = Depends(deps.get_db),
    organizador_id: PyUUID,
    organizador_in: OrganizadorUpdate,
) -> Any:
    organizador = organizador_service.get_or_404(db, id=organizador_id)
    try:
        organizador = organizador_service.update(db, db_obj=organizador, obj_in=organizador_in)
        db.commit()
        db.refresh(organizador)
        return {"success": True, "data": organizador, "message": "Organizador actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando organizador {organizador_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{organizador_id}",
               response_model=ApiResponse,
               summary="Eliminar un Organizador sin cajoncitos")
def delete_organizador(*, db: Session = Depends(deps.get_db), organizador_id: PyUUID) -> Any:
    try:
        organizador_service.remove(db, id=organizador_id)
        db.commit()
        return {"success": True, "message": "Organizador eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando organizador {organizador_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Cajoncitos del organizador ---

@router.get("/{organizador_id}/cajoncitos",
            response_model=ApiResponse[List[CajoncitoRead]],
            summary="Listar Cajoncitos de un Organizador")
def read_cajoncitos(organizador_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    organizador_service.get_or_404(db, id=organizador_id)
    cajoncitos = cajoncito_service.get_by_parent(db, parent_field="organizador_id", parent_id=organizador_id)
    return {"success": True, "data": cajoncitos}


@router.post("/{organizador_id}/cajoncitos",
             response_model=ApiResponse[CajoncitoRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Cajoncito en un Organizador")
def create_cajoncito(
    *,
    db: Session = Depends(deps.get_db),
    organizador_id: PyUUID,
    cajoncito_in: CajoncitoCreate,
) -> Any:
    """Sin `codigo` se asigna el siguiente `CAJ-NNN`. Máximo 50 cajoncitos por organizador."""
    organizador_service.get_or_404(db, id=organizador_id)
    try:
        cajoncito = cajoncito_service.create_in(
            db, parent_field="organizador_id", parent_id=organizador_id, obj_in=cajoncito_in
        )
        db.commit()
        db.refresh(cajoncito)
        return {"success": True, "data": cajoncito, "message": "Cajoncito creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear cajoncito: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=cajoncito_service.duplicado_mensaje)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando cajoncito: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.armario import ArmarioDetalle, ArmarioUpdate
from app.schemas.cajon import CajonCreate, CajonRead
from app.schemas.common import ApiResponse
from app.schemas.organizador import OrganizadorCreate, OrganizadorRead
from app.services.armario import armario_service
from app.services.cajon import cajon_service
from app.services.organizador import organizador_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{armario_id}",
            response_model=ApiResponse[ArmarioDetalle],
            summary="Obtener un Armario")
def read_armario(armario_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    armario = armario_service.get_or_404(db, id=armario_id)
    return {"success": True, "data": armario}


@router.put("/{armario_id}",
            response_model=ApiResponse[ArmarioDetalle],
            summary="Actualizar un Armario")
def update_armario(
    *,
    db: Session = Depends(deps.get_db),
    armario_id: PyUUID,
    armario_in: ArmarioUpdate,
) -> Any:
    armario = armario_service.get_or_404(db, id=armario_id)
    try:
        armario = armario_service.update(db, db_obj=armario, obj_in=armario_in)
        db.commit()
        db.refresh(armario)
        return {"success": True, "data": armario, "message": "Armario actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al actualizar armario {armario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de armario ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando armario {armario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{armario_id}",
               response_model=ApiResponse,
               summary="Eliminar un Armario vacío")
def delete_armario(*, db: Session = Depends(deps.get_db), armario_id: PyUUID) -> Any:
    try:
        armario_service.remove(db, id=armario_id)
        db.commit()
        return {"success": True, "message": "Armario eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando armario {armario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Cajones del armario ---

@router.get("/{armario_id}/cajones",
            response_model=ApiResponse[List[CajonRead]],
            summary="Listar Cajones de un Armario")
def read_cajones(armario_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    armario_service.get_or_404(db, id=armario_id)
    cajones = cajon_service.get_by_parent(db, parent_field="armario_id", parent_id=armario_id)
    return {"success": True, "data": cajones}


@router.post("/{armario_id}/cajones",
             response_model=ApiResponse[CajonRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Cajón en un Armario")
def create_cajon(
    *,
    db: Session = Depends(deps.get_db),
    armario_id: PyUUID,
    cajon_in: CajonCreate,
) -> Any:
    """Sin `codigo` se asigna el siguiente `CAJ-NNN` del armario."""
    armario_service.get_or_404(db, id=armario_id)
    try:
        cajon = cajon_service.create_in(db, parent_field="armario_id", parent_id=armario_id, obj_in=cajon_in)
        db.commit()
        db.refresh(cajon)
        logger.info(f"Cajón '{cajon.codigo}' creado en armario {armario_id}.")
        return {"success": True, "data": cajon, "message": "Cajón creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear cajón: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=cajon_service.duplicado_mensaje)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando cajón: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Organizadores del armario ---

@router.get("/{armario_id}/organizadores",
            response_model=ApiResponse[List[OrganizadorRead]],
            summary="Listar Organizadores de un Armario")
def read_organizadores(armario_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    armario_service.get_or_404(db, id=armario_id)
    organizadores = organizador_service.get_by_parent(db, parent_field="armario_id", parent_id=armario_id)
    return {"success": True, "data": organizadores}


@router.post("/{armario_id}/organizadores",
             response_model=ApiResponse[OrganizadorRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Organizador en un Armario")
def create_organizador(
    *,
    db: Session = Depends(deps.get_db),
    armario_id: PyUUID,
    organizador_in: OrganizadorCreate,
) -> Any:
    """Sin `codigo` se asigna el siguiente `ORG-NNN`; `cantidadCajoncitos` crea sus cajoncitos."""
    armario_service.get_or_404(db, id=armario_id)
    try:
        organizador = organizador_service.create_in(
            db, parent_field="armario_id", parent_id=armario_id, obj_in=organizador_in
        )
        db.commit()
        db.refresh(organizador)
        logger.info(f"Organizador '{organizador.codigo}' creado en armario {armario_id}.")
        return {"success": True, "data": organizador, "message": "Organizador creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear organizador: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=organizador_service.duplicado_mensaje)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando organizador: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

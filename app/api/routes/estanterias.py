import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.cajon import CajonCreate, CajonRead
from app.schemas.common import ApiResponse
from app.schemas.estante import EstanteCreate, EstanteRead
from app.schemas.estanteria import EstanteriaDetalle, EstanteriaUpdate
from app.schemas.organizador import OrganizadorCreate, OrganizadorRead
from app.services.cajon import cajon_service
from app.services.estante import estante_service
from app.services.estanteria import estanteria_service
from app.services.organizador import organizador_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/{estanteria_id}",
            response_model=ApiResponse[EstanteriaDetalle],
            summary="Obtener una Estantería")
def read_estanteria(estanteria_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    estanteria = estanteria_service.get_or_404(db, id=estanteria_id)
    return {"success": True, "data": estanteria}


@router.put("/{estanteria_id}",
            response_model=ApiResponse[EstanteriaDetalle],
            summary="Actualizar una Estantería")
def update_estanteria(
    *,
    db: Session = Depends(deps.get_db),
    estanteria_id: PyUUID,
    estanteria_in: EstanteriaUpdate,
) -> Any:
    estanteria = estanteria_service.get_or_404(db, id=estanteria_id)
    try:
        estanteria = estanteria_service.update(db, db_obj=estanteria, obj_in=estanteria_in)
        db.commit()
        db.refresh(estanteria)
        return {"success": True, "data": estanteria, "message": "Estantería actualizada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al actualizar estantería {estanteria_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de estantería ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando estantería {estanteria_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{estanteria_id}",
               response_model=ApiResponse,
               summary="Eliminar una Estantería vacía")
def delete_estanteria(*, db: Session = Depends(deps.get_db), estanteria_id: PyUUID) -> Any:
    try:
        estanteria_service.remove(db, id=estanteria_id)
        db.commit()
        return {"success": True, "message": "Estantería eliminada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando estantería {estanteria_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Cajones de la estantería ---

@router.get("/{estanteria_id}/cajones",
            response_model=ApiResponse[List[CajonRead]],
            summary="Listar Cajones de una Estantería")
def read_cajones(estanteria_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    estanteria_service.get_or_404(db, id=estanteria_id)
    cajones = cajon_service.get_by_parent(db, parent_field="estanteria_id", parent_id=estanteria_id)
    return {"success": True, "data": cajones}


@router.post("/{estanteria_id}/cajones",
             response_model=ApiResponse[CajonRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Cajón en una Estantería")
def create_cajon(
    *,
    db: Session = Depends(deps.get_db),
    estanteria_id: PyUUID,
    cajon_in: CajonCreate,
) -> Any:
    estanteria_service.get_or_404(db, id=estanteria_id)
    try:
        cajon = cajon_service.create_in(db, parent_field="estanteria_id", parent_id=estanteria_id, obj_in=cajon_in)
        db.commit()
        db.refresh(cajon)
        logger.info(f"Cajón '{cajon.codigo}' creado en estantería {estanteria_id}.")
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


# --- Estantes de la estantería ---

@router.get("/{estanteria_id}/estantes",
            response_model=ApiResponse[List[EstanteRead]],
            summary="Listar Estantes de una Estantería")
def read_estantes(estanteria_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    estanteria_service.get_or_404(db, id=estanteria_id)
    estantes = estante_service.get_by_parent(db, parent_field="estanteria_id", parent_id=estanteria_id)
    return {"success": True, "data": estantes}


@router.post("/{estanteria_id}/estantes",
             response_model=ApiResponse[EstanteRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Estante en una Estantería")
def create_estante(
    *,
    db: Session = Depends(deps.get_db),
    estanteria_id: PyUUID,
    estante_in: EstanteCreate,
) -> Any:
    """Sin `codigo` se asigna el siguiente `EST-NNN` de la estantería."""
    estanteria_service.get_or_404(db, id=estanteria_id)
    try:
        estante = estante_service.create_in(
            db, parent_field="estanteria_id", parent_id=estanteria_id, obj_in=estante_in
        )
        db.commit()
        db.refresh(estante)
        return {"success": True, "data": estante, "message": "Estante creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear estante: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=estante_service.duplicado_mensaje)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando estante: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Organizadores de la estantería ---

@router.get("/{estanteria_id}/organizadores",
            response_model=ApiResponse[List[OrganizadorRead]],
            summary="Listar Organizadores de una Estantería")
def read_organizadores(estanteria_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    estanteria_service.get_or_404(db, id=estanteria_id)
    organizadores = organizador_service.get_by_parent(db, parent_field="estanteria_id", parent_id=estanteria_id)
    return {"success": True, "data": organizadores}


@router.post("/{estanteria_id}/organizadores",
             response_model=ApiResponse[OrganizadorRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Organizador en una Estantería")
def create_organizador(
    *,
    db: Session = Depends(deps.get_db),
    estanteria_id: PyUUID,
    organizador_in: OrganizadorCreate,
) -> Any:
    estanteria_service.get_or_404(db, id=estanteria_id)
    try:
        organizador = organizador_service.create_in(
            db, parent_field="estanteria_id", parent_id=estanteria_id, obj_in=organizador_in
        )
        db.commit()
        db.refresh(organizador)
        logger.info(f"Organizador '{organizador.codigo}' creado en estantería {estanteria_id}.")
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

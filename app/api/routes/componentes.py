import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.models.usuario import Usuario as UsuarioModel
from app.schemas.common import ApiResponse, PaginatedResponse, Pagination
from app.schemas.componente import (
    ComponenteCreate,
    ComponenteDetalle,
    ComponenteRead,
    ComponenteUbicacionCreate,
    ComponenteUbicacionRead,
    ComponenteUbicacionUpdate,
    ComponenteUpdate,
)
from app.schemas.enums import CategoriaComponenteEnum, SortOrderEnum
from app.services.componente import YA_ASOCIADO, componente_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("",
            response_model=PaginatedResponse[ComponenteRead],
            summary="Listar Componentes")
def read_componentes(
    db: Session = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Texto a buscar en la descripción"),
    categoria: Optional[CategoriaComponenteEnum] = Query(None),
    sort_by: str = Query("categoria", alias="sortBy", pattern="^(categoria|descripcion|createdAt)$"),
    sort_order: SortOrderEnum = Query(SortOrderEnum.ASC, alias="sortOrder"),
) -> Any:
    """El `stockActual` de cada componente es la suma de sus cantidades por cajoncito."""
    componentes, total = componente_service.search(
        db, page=page, limit=limit, search=search,
        categoria=categoria.value if categoria else None,
        sort_by=sort_by, sort_order=sort_order.value,
    )
    return {"success": True, "data": componentes, "pagination": Pagination.build(page=page, limit=limit, total=total)}


@router.post("",
             response_model=ApiResponse[ComponenteDetalle],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Componente")
def create_componente(
    *,
    db: Session = Depends(deps.get_db),
    componente_in: ComponenteCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    logger.info(f"Usuario '{current_user.email}' creando componente {componente_in.categoria.value}.")
    try:
        componente = componente_service.create(db=db, obj_in=componente_in)
        db.commit()
        db.refresh(componente)
        return {"success": True, "data": componente, "message": "Componente creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear componente: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=YA_ASOCIADO)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando componente: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/{componente_id}",
            response_model=ApiResponse[ComponenteDetalle],
            summary="Obtener un Componente")
def read_componente(componente_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    return {"success": True, "data": componente}


@router.put("/{componente_id}",
            response_model=ApiResponse[ComponenteDetalle],
            summary="Actualizar un Componente")
def update_componente(
    *,
    db: Session = Depends(deps.get_db),
    componente_id: PyUUID,
    componente_in: ComponenteUpdate,
) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    try:
        componente = componente_service.update(db=db, db_obj=componente, obj_in=componente_in)
        db.commit()
        db.refresh(componente)
        return {"success": True, "data": componente, "message": "Componente actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{componente_id}",
               response_model=ApiResponse,
               summary="Eliminar (desactivar) un Componente")
def delete_componente(*, db: Session = Depends(deps.get_db), componente_id: PyUUID) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    try:
        componente_service.soft_delete(db, db_obj=componente)
        db.commit()
        return {"success": True, "message": "Componente eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Ubicaciones del componente ---

@router.get("/{componente_id}/ubicaciones",
            response_model=ApiResponse[List[ComponenteUbicacionRead]],
            summary="Listar Cajoncitos de un Componente")
def read_componente_ubicaciones(componente_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    return {"success": True, "data": componente.ubicaciones}


@router.post("/{componente_id}/ubicaciones",
             response_model=ApiResponse[ComponenteUbicacionRead],
             status_code=status.HTTP_201_CREATED,
             summary="Ubicar un Componente en un Cajoncito")
def create_componente_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    componente_id: PyUUID,
    ubicacion_in: ComponenteUbicacionCreate,
) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    try:
        asociacion = componente_service.add_ubicacion(db, componente=componente, obj_in=ubicacion_in)
        db.commit()
        db.refresh(asociacion)
        return {"success": True, "data": asociacion, "message": "Ubicación asignada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad ubicando componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=YA_ASOCIADO)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado ubicando componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.put("/{componente_id}/ubicaciones/{assoc_id}",
            response_model=ApiResponse[ComponenteUbicacionRead],
            summary="Actualizar la cantidad de un Componente en un Cajoncito")
def update_componente_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    componente_id: PyUUID,
    assoc_id: PyUUID,
    ubicacion_in: ComponenteUbicacionUpdate,
) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    try:
        asociacion = componente_service.update_ubicacion(
            db, componente=componente, assoc_id=assoc_id, obj_in=ubicacion_in
        )
        db.commit()
        db.refresh(asociacion)
        return {"success": True, "data": asociacion, "message": "Cantidad actualizada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando ubicación {assoc_id} del componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{componente_id}/ubicaciones/{assoc_id}",
               response_model=ApiResponse,
               summary="Retirar un Componente de un Cajoncito")
def delete_componente_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    componente_id: PyUUID,
    assoc_id: PyUUID,
) -> Any:
    componente = componente_service.get_active_or_404(db, id=componente_id)
    try:
        componente_service.remove_ubicacion(db, componente=componente, assoc_id=assoc_id)
        db.commit()
        return {"success": True, "message": "Ubicación eliminada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado retirando ubicación {assoc_id} del componente {componente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.common import ApiResponse, PaginatedResponse, Pagination
from app.schemas.enums import SortOrderEnum
from app.schemas.equipo import (
    EquipoCreate,
    EquipoDetalle,
    EquipoRead,
    EquipoRepuestoCreate,
    EquipoRepuestoRead,
    EquipoUpdate,
)
from app.services.equipo import equipo_service
from app.models.usuario import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


def _conflicto_unicidad(e: IntegrityError, codigo: Optional[str], sap: Optional[str]) -> HTTPException:
    """Traduce una violación de unicidad de la tabla `equipos` al mensaje de la API."""
    error_detail_db = str(getattr(e, "orig", None) or e)
    if "sap" in error_detail_db and sap:
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"El SAP '{sap}' ya está en uso")
    if "codigo" in error_detail_db and codigo:
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"El código '{codigo}' ya está en uso")
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La asociación ya existe")


# ==============================================================================
# Endpoints para EQUIPOS (CRUD y Búsqueda)
# ==============================================================================

@router.get("",
            response_model=PaginatedResponse[EquipoRead],
            summary="Listar Equipos",
            response_description="Lista paginada de equipos activos con el conteo de repuestos.")
def read_equipos(
    db: Session = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Busca en código, SAP, nombre, descripción, marca, modelo y N/S"),
    sort_by: str = Query("codigo", alias="sortBy", pattern="^(codigo|nombre|createdAt)$"),
    sort_order: SortOrderEnum = Query(SortOrderEnum.ASC, alias="sortOrder"),
) -> Any:
    equipos, total = equipo_service.search(
        db, page=page, limit=limit, search=search, sort_by=sort_by, sort_order=sort_order.value
    )
    return {"success": True, "data": equipos, "pagination": Pagination.build(page=page, limit=limit, total=total)}


@router.post("",
             response_model=ApiResponse[EquipoDetalle],
             status_code=status.HTTP_201_CREATED,
             summary="Crear Nuevo Equipo",
             response_description="El equipo creado.")
def create_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_in: EquipoCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Crea un equipo y, opcionalmente, sus asociaciones con repuestos.
    `codigo` es único y `sap`, si se indica, también.
    """
    logger.info(f"Usuario '{current_user.email}' intentando crear equipo '{equipo_in.codigo}'.")
    try:
        equipo = equipo_service.create(db=db, obj_in=equipo_in)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo '{equipo.codigo}' (ID: {equipo.id}) creado exitosamente por '{current_user.email}'.")
        return {"success": True, "data": equipo, "message": "Equipo creado exitosamente"}
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear equipo '{equipo_in.codigo}': {http_exc.detail}")
        raise http_exc
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear equipo '{equipo_in.codigo}': {e}", exc_info=True)
        raise _conflicto_unicidad(e, equipo_in.codigo, equipo_in.sap)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando equipo '{equipo_in.codigo}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/{equipo_id}",
            response_model=ApiResponse[EquipoDetalle],
            summary="Obtener un Equipo por ID",
            response_description="Información del equipo con sus repuestos asociados.")
def read_equipo_by_id(equipo_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    equipo = equipo_service.get_active_or_404(db, id=equipo_id)
    return {"success": True, "data": equipo}


@router.put("/{equipo_id}",
            response_model=ApiResponse[EquipoDetalle],
            summary="Actualizar un Equipo",
            response_description="Información actualizada del equipo.")
def update_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: PyUUID,
    equipo_in: EquipoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    logger.info(f"Usuario '{current_user.email}' actualizando equipo ID: {equipo_id} con datos: {equipo_in.model_dump(exclude_unset=True)}")
    db_equipo = equipo_service.get_active_or_404(db, id=equipo_id)
    try:
        equipo = equipo_service.update(db=db, db_obj=db_equipo, obj_in=equipo_in)
        db.commit()
        db.refresh(equipo)
        return {"success": True, "data": equipo, "message": "Equipo actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad actualizando equipo {equipo_id}: {e}", exc_info=True)
        raise _conflicto_unicidad(e, equipo_in.codigo, equipo_in.sap)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando equipo {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{equipo_id}",
               response_model=ApiResponse,
               summary="Eliminar (desactivar) un Equipo")
def delete_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: PyUUID,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    db_equipo = equipo_service.get_active_or_404(db, id=equipo_id)
    logger.warning(f"Usuario '{current_user.email}' desactivando equipo '{db_equipo.codigo}'.")
    try:
        equipo_service.soft_delete(db, db_obj=db_equipo)
        db.commit()
        return {"success": True, "message": "Equipo eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando equipo {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# ==============================================================================
# Endpoints para los REPUESTOS de un equipo
# ==============================================================================

@router.get("/{equipo_id}/repuestos",
            response_model=ApiResponse[List[EquipoRepuestoRead]],
            summary="Listar Repuestos de un Equipo")
def read_equipo_repuestos(equipo_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    equipo = equipo_service.get_active_or_404(db, id=equipo_id)
    return {"success": True, "data": equipo_service.get_repuestos(db, equipo=equipo)}


@router.post("/{equipo_id}/repuestos",
             response_model=ApiResponse[EquipoRepuestoRead],
             status_code=status.HTTP_201_CREATED,
             summary="Asociar un Repuesto a un Equipo")
def add_equipo_repuesto(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: PyUUID,
    asociacion_in: EquipoRepuestoCreate,
) -> Any:
    """Asociación técnica: indica que el equipo usa el repuesto. No afecta al stock."""
    equipo = equipo_service.get_active_or_404(db, id=equipo_id)
    try:
        asociacion = equipo_service.add_repuesto(db, equipo=equipo, obj_in=asociacion_in)
        db.commit()
        db.refresh(asociacion)
        return {"success": True, "data": asociacion, "message": "Repuesto asociado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad asociando repuesto al equipo {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La asociación ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado asociando repuesto al equipo {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

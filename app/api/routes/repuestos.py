import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.models.usuario import Usuario as UsuarioModel
from app.schemas.common import ApiResponse, Conteo, PaginatedResponse, Pagination
from app.schemas.enums import SortOrderEnum
from app.schemas.referencias import RepuestoSimple
from app.schemas.repuesto import (
    CodigoDisponibilidad,
    RepuestoCreate,
    RepuestoDetalle,
    RepuestoEquipoRead,
    RepuestoEquiposIn,
    RepuestoRead,
    RepuestoUbicacionCreate,
    RepuestoUbicacionRead,
    RepuestoUbicacionUpdate,
    RepuestoUpdate,
)
from app.services.repuesto import repuesto_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("",
            response_model=PaginatedResponse[RepuestoRead],
            summary="Listar Repuestos")
def read_repuestos(
    db: Session = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Busca en código, nombre, marca, modelo, número de parte..."),
    categoria: Optional[str] = Query(None),
    sort_by: str = Query("codigo", alias="sortBy", pattern="^(codigo|nombre|stockActual|createdAt)$"),
    sort_order: SortOrderEnum = Query(SortOrderEnum.ASC, alias="sortOrder"),
) -> Any:
    repuestos, total = repuesto_service.search(
        db, page=page, limit=limit, search=search, categoria=categoria,
        sort_by=sort_by, sort_order=sort_order.value,
    )
    return {"success": True, "data": repuestos, "pagination": Pagination.build(page=page, limit=limit, total=total)}


@router.post("",
             response_model=ApiResponse[RepuestoDetalle],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Repuesto")
def create_repuesto(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_in: RepuestoCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Crea el repuesto junto con sus ubicaciones y equipos en una única transacción.
    El stock inicial es la suma de las cantidades de `ubicaciones`.
    """
    logger.info(f"Usuario '{current_user.email}' creando repuesto '{repuesto_in.codigo}'.")
    try:
        repuesto = repuesto_service.create(db=db, obj_in=repuesto_in)
        db.commit()
        db.refresh(repuesto)
        logger.info(f"Repuesto '{repuesto.codigo}' creado con stock {repuesto.stock_actual}.")
        return {"success": True, "data": repuesto, "message": "Repuesto creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear repuesto: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando repuesto: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/validate/code/{code}",
            response_model=ApiResponse[CodigoDisponibilidad],
            summary="Verificar disponibilidad de un código")
def validate_code(
    code: str,
    db: Session = Depends(deps.get_db),
    exclude_id: Optional[PyUUID] = Query(None, alias="excludeId"),
) -> Any:
    existing = repuesto_service.validate_code(db, codigo=code, exclude_id=exclude_id)
    data = CodigoDisponibilidad(
        is_available=existing is None,
        existing_repuesto=RepuestoSimple.model_validate(existing) if existing else None,
    )
    return {"success": True, "data": data}


@router.get("/{repuesto_id}",
            response_model=ApiResponse[RepuestoDetalle],
            summary="Obtener un Repuesto")
def read_repuesto(repuesto_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    return {"success": True, "data": repuesto}


@router.put("/{repuesto_id}",
            response_model=ApiResponse[RepuestoDetalle],
            summary="Actualizar un Repuesto")
def update_repuesto(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    repuesto_in: RepuestoUpdate,
) -> Any:
    """Si se envían `ubicaciones` o `equipos`, reemplazan a las listas anteriores."""
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        repuesto = repuesto_service.update(db=db, db_obj=repuesto, obj_in=repuesto_in)
        db.commit()
        db.refresh(repuesto)
        return {"success": True, "data": repuesto, "message": "Repuesto actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad actualizando repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{repuesto_id}",
               response_model=ApiResponse,
               summary="Eliminar (desactivar) un Repuesto")
def delete_repuesto(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """Solo se permite si el repuesto no tiene stock en ninguna ubicación."""
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    logger.warning(f"Usuario '{current_user.email}' eliminando repuesto '{repuesto.codigo}'.")
    try:
        repuesto_service.soft_delete(db, db_obj=repuesto)
        db.commit()
        return {"success": True, "message": "Repuesto eliminado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Ubicaciones del repuesto ---

@router.get("/{repuesto_id}/ubicaciones",
            response_model=ApiResponse[List[RepuestoUbicacionRead]],
            summary="Listar Ubicaciones de un Repuesto")
def read_repuesto_ubicaciones(repuesto_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    return {"success": True, "data": repuesto.ubicaciones}


@router.post("/{repuesto_id}/ubicaciones",
             response_model=ApiResponse[RepuestoUbicacionRead],
             status_code=status.HTTP_201_CREATED,
             summary="Ubicar un Repuesto")
def create_repuesto_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    ubicacion_in: RepuestoUbicacionCreate,
) -> Any:
    """Debe indicarse exactamente un campo de ubicación. Recalcula el stock del repuesto."""
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        asociacion = repuesto_service.add_ubicacion(db, repuesto=repuesto, obj_in=ubicacion_in)
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
        logger.error(f"Error de integridad ubicando repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El repuesto ya está asociado a esta ubicación")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado ubicando repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.put("/{repuesto_id}/ubicaciones/{assoc_id}",
            response_model=ApiResponse[RepuestoUbicacionRead],
            summary="Actualizar la cantidad de un Repuesto en una ubicación")
def update_repuesto_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    assoc_id: PyUUID,
    ubicacion_in: RepuestoUbicacionUpdate,
) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        asociacion = repuesto_service.update_ubicacion(
            db, repuesto=repuesto, assoc_id=assoc_id, obj_in=ubicacion_in
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
        logger.error(f"Error inesperado actualizando ubicación {assoc_id} del repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{repuesto_id}/ubicaciones/{assoc_id}",
               response_model=ApiResponse,
               summary="Retirar un Repuesto de una ubicación")
def delete_repuesto_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    assoc_id: PyUUID,
) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        repuesto_service.remove_ubicacion(db, repuesto=repuesto, assoc_id=assoc_id)
        db.commit()
        return {"success": True, "message": "Ubicación eliminada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado retirando ubicación {assoc_id} del repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


# --- Equipos del repuesto ---

@router.get("/{repuesto_id}/equipos",
            response_model=ApiResponse[List[RepuestoEquipoRead]],
            summary="Listar Equipos que usan un Repuesto")
def read_repuesto_equipos(repuesto_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    return {"success": True, "data": repuesto_service.get_equipos(repuesto)}


@router.post("/{repuesto_id}/equipos",
             response_model=ApiResponse[Conteo],
             summary="Asociar Equipos a un Repuesto")
def add_repuesto_equipos(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    equipos_in: RepuestoEquiposIn,
) -> Any:
    """Los equipos ya asociados se ignoran; devuelve cuántos se asociaron."""
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        count = repuesto_service.add_equipos(db, repuesto=repuesto, equipo_ids=equipos_in.equipo_ids)
        db.commit()
        return {"success": True, "data": Conteo(count=count), "message": "Equipos asociados exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado asociando equipos al repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{repuesto_id}/equipos",
               response_model=ApiResponse[Conteo],
               summary="Desasociar Equipos de un Repuesto")
def remove_repuesto_equipos(
    *,
    db: Session = Depends(deps.get_db),
    repuesto_id: PyUUID,
    equipos_in: RepuestoEquiposIn,
) -> Any:
    repuesto = repuesto_service.get_active_or_404(db, id=repuesto_id)
    try:
        count = repuesto_service.remove_equipos(db, repuesto=repuesto, equipo_ids=equipos_in.equipo_ids)
        db.commit()
        return {"success": True, "data": Conteo(count=count), "message": "Equipos desasociados exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado desasociando equipos del repuesto {repuesto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.models.usuario import Usuario as UsuarioModel
from app.schemas.armario import ArmarioCreate, ArmarioRead, ArmarioUpdate
from app.schemas.common import ApiResponse, PaginatedResponse, Pagination
from app.schemas.contenido import ContenidoUbicacion
from app.schemas.enums import FiltroItemsEnum, SortOrderEnum, TipoUbicacionEnum
from app.schemas.estanteria import EstanteriaCreate, EstanteriaRead, EstanteriaUpdate
from app.schemas.referencias import NodoArbol
from app.schemas.ubicacion import UbicacionCreate, UbicacionDetalle, UbicacionRead, UbicacionUpdate
from app.services import jerarquia
from app.services.armario import armario_service
from app.services.contenido import contenido_service
from app.services.estanteria import estanteria_service
from app.services.ubicacion import ubicacion_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("",
            response_model=None,
            summary="Listar Ubicaciones",
            response_description="Árbol completo, lista plana de un tipo o lista paginada de ubicaciones.")
def read_ubicaciones(
    db: Session = Depends(deps.get_db),
    tree: bool = Query(False, description="Devuelve el árbol completo de la jerarquía"),
    tipo: Optional[TipoUbicacionEnum] = Query(None, alias="type", description="Lista plana de un nivel"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    sort_by: str = Query("codigo", alias="sortBy", pattern="^(codigo|nombre|createdAt)$"),
    sort_order: SortOrderEnum = Query(SortOrderEnum.ASC, alias="sortOrder"),
) -> Any:
    """
    Tres modos de consulta:
    * `tree=true`: árbol completo de ubicaciones activas.
    * `type=<nivel>`: lista plana de todos los nodos de ese nivel.
    * Por defecto: lista paginada de ubicaciones con filtros y orden.
    """
    if tree:
        return ApiResponse[List[NodoArbol]](data=jerarquia.arbol(db))

    if tipo is not None:
        nodos = [
            NodoArbol(id=n.id, nombre=n.nombre, codigo=n.codigo, tipo=tipo.value)
            for n in jerarquia.listar_por_tipo(db, tipo.value)
        ]
        return ApiResponse[List[NodoArbol]](data=nodos)

    ubicaciones, total = ubicacion_service.search(
        db, page=page, limit=limit, search=search, is_active=is_active,
        sort_by=sort_by, sort_order=sort_order.value,
    )
    return PaginatedResponse[UbicacionRead](
        data=[UbicacionRead.model_validate(u) for u in ubicaciones],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("",
             response_model=ApiResponse[UbicacionRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear una Ubicación")
def create_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_in: UbicacionCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    logger.info(f"Usuario '{current_user.email}' creando ubicación '{ubicacion_in.nombre}'.")
    try:
        ubicacion = ubicacion_service.create(db=db, obj_in=ubicacion_in)
        db.commit()
        db.refresh(ubicacion)
        logger.info(f"Ubicación '{ubicacion.codigo}' (ID: {ubicacion.id}) creada exitosamente.")
        return {"success": True, "data": ubicacion, "message": "Ubicación creada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear ubicación: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de ubicación ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando ubicación: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/{ubicacion_id}",
            response_model=ApiResponse[UbicacionDetalle],
            summary="Obtener una Ubicación con sus armarios y estanterías")
def read_ubicacion(
    ubicacion_id: PyUUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    ubicacion = ubicacion_service.get_or_404(db, id=ubicacion_id)
    return {"success": True, "data": ubicacion}


@router.put("/{ubicacion_id}",
            response_model=ApiResponse[UbicacionRead],
            summary="Actualizar una Ubicación")
def update_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    ubicacion_in: UbicacionUpdate,
) -> Any:
    ubicacion = ubicacion_service.get_or_404(db, id=ubicacion_id)
    try:
        ubicacion = ubicacion_service.update(db=db, db_obj=ubicacion, obj_in=ubicacion_in)
        db.commit()
        db.refresh(ubicacion)
        return {"success": True, "data": ubicacion, "message": "Ubicación actualizada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al actualizar ubicación {ubicacion_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de ubicación ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando ubicación {ubicacion_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{ubicacion_id}",
               response_model=ApiResponse,
               summary="Eliminar una Ubicación vacía")
def delete_ubicacion(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    logger.warning(f"Usuario '{current_user.email}' eliminando ubicación ID {ubicacion_id}.")
    try:
        ubicacion_service.remove(db=db, id=ubicacion_id)
        db.commit()
        return {"success": True, "message": "Ubicación eliminada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando ubicación {ubicacion_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get("/{location_id}/contents",
            response_model=ApiResponse[ContenidoUbicacion],
            summary="Contenido de cualquier nodo de la jerarquía")
def read_contenido(
    location_id: PyUUID,
    db: Session = Depends(deps.get_db),
    item_type: FiltroItemsEnum = Query(FiltroItemsEnum.ALL, alias="itemType"),
    include_children: bool = Query(True, alias="includeChildren"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> Any:
    """
    Repuestos y componentes guardados en el nodo `location_id` (de cualquier
    nivel) y, con `includeChildren`, en todos sus descendientes.
    """
    contenido = contenido_service.contenido_ubicacion(
        db, location_id=location_id, item_type=item_type.value,
        include_children=include_children, page=page, limit=limit,
    )
    return {"success": True, "data": contenido}


# --- Armarios de la ubicación ---

@router.get("/{ubicacion_id}/armarios",
            response_model=ApiResponse[List[ArmarioRead]],
            summary="Listar Armarios de una Ubicación")
def read_armarios(ubicacion_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    armarios = armario_service.get_by_parent(db, parent_field="ubicacion_id", parent_id=ubicacion_id)
    return {"success": True, "data": armarios}


@router.post("/{ubicacion_id}/armarios",
             response_model=ApiResponse[ArmarioRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear un Armario en una Ubicación")
def create_armario(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    armario_in: ArmarioCreate,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    try:
        armario = armario_service.create_in(db, parent_field="ubicacion_id", parent_id=ubicacion_id, obj_in=armario_in)
        db.commit()
        db.refresh(armario)
        logger.info(f"Armario '{armario.codigo}' creado en ubicación {ubicacion_id}.")
        return {"success": True, "data": armario, "message": "Armario creado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear armario: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de armario ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando armario: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.put("/{ubicacion_id}/armarios/{armario_id}",
            response_model=ApiResponse[ArmarioRead],
            summary="Actualizar un Armario de una Ubicación")
def update_armario(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    armario_id: PyUUID,
    armario_in: ArmarioUpdate,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    armario = armario_service.get_in_parent_or_404(db, id=armario_id, parent_field="ubicacion_id", parent_id=ubicacion_id)
    try:
        armario = armario_service.update(db, db_obj=armario, obj_in=armario_in)
        db.commit()
        db.refresh(armario)
        return {"success": True, "data": armario, "message": "Armario actualizado exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando armario {armario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{ubicacion_id}/armarios/{armario_id}",
               response_model=ApiResponse,
               summary="Eliminar un Armario vacío de una Ubicación")
def delete_armario(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    armario_id: PyUUID,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    armario_service.get_in_parent_or_404(db, id=armario_id, parent_field="ubicacion_id", parent_id=ubicacion_id)
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


# --- Estanterías de la ubicación ---

@router.get("/{ubicacion_id}/estanterias",
            response_model=ApiResponse[List[EstanteriaRead]],
            summary="Listar Estanterías de una Ubicación")
def read_estanterias(ubicacion_id: PyUUID, db: Session = Depends(deps.get_db)) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    estanterias = estanteria_service.get_by_parent(db, parent_field="ubicacion_id", parent_id=ubicacion_id)
    return {"success": True, "data": estanterias}


@router.post("/{ubicacion_id}/estanterias",
             response_model=ApiResponse[EstanteriaRead],
             status_code=status.HTTP_201_CREATED,
             summary="Crear una Estantería en una Ubicación")
def create_estanteria(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    estanteria_in: EstanteriaCreate,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    try:
        estanteria = estanteria_service.create_in(
            db, parent_field="ubicacion_id", parent_id=ubicacion_id, obj_in=estanteria_in
        )
        db.commit()
        db.refresh(estanteria)
        logger.info(f"Estantería '{estanteria.codigo}' creada en ubicación {ubicacion_id}.")
        return {"success": True, "data": estanteria, "message": "Estantería creada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear estantería: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de estantería ya existe")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando estantería: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.put("/{ubicacion_id}/estanterias/{estanteria_id}",
            response_model=ApiResponse[EstanteriaRead],
            summary="Actualizar una Estantería de una Ubicación")
def update_estanteria(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    estanteria_id: PyUUID,
    estanteria_in: EstanteriaUpdate,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    estanteria = estanteria_service.get_in_parent_or_404(
        db, id=estanteria_id, parent_field="ubicacion_id", parent_id=ubicacion_id
    )
    try:
        estanteria = estanteria_service.update(db, db_obj=estanteria, obj_in=estanteria_in)
        db.commit()
        db.refresh(estanteria)
        return {"success": True, "data": estanteria, "message": "Estantería actualizada exitosamente"}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando estantería {estanteria_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.delete("/{ubicacion_id}/estanterias/{estanteria_id}",
               response_model=ApiResponse,
               summary="Eliminar una Estantería vacía de una Ubicación")
def delete_estanteria(
    *,
    db: Session = Depends(deps.get_db),
    ubicacion_id: PyUUID,
    estanteria_id: PyUUID,
) -> Any:
    ubicacion_service.get_or_404(db, id=ubicacion_id)
    estanteria_service.get_in_parent_or_404(db, id=estanteria_id, parent_field="ubicacion_id", parent_id=ubicacion_id)
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

import logging
from typing import Any, List
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.api import deps
from app.core.error_handlers import es_violacion_unicidad
from app.schemas.common import ApiResponse
from app.schemas.usuario import UsuarioCreate, UsuarioRead, UsuarioUpdate
from app.services.usuario import usuario_service
from app.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[UsuarioRead],
    status_code=status.HTTP_201_CREATED,
    summary="Crear un nuevo Usuario",
)
def create_usuario(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UsuarioCreate,
    current_user: UsuarioModel = Depends(deps.require_admin)
) -> Any:
    """Crea un nuevo usuario en el sistema. Solo administradores."""
    logger.info(f"Intento de creación de usuario '{user_in.email}' por admin '{current_user.email}'")
    try:
        user = usuario_service.create(db=db, obj_in=user_in)
        db.commit()
        db.refresh(user)
        logger.info(f"Usuario '{user.email}' (ID: {user.id}) creado exitosamente por '{current_user.email}'.")
        return {"success": True, "data": user, "message": "Usuario creado exitosamente"}
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear usuario '{user_in.email}': {http_exc.detail}")
        raise http_exc
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al crear usuario: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con ese correo electrónico.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando usuario '{user_in.email}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")


@router.get(
    "",
    response_model=ApiResponse[List[UsuarioRead]],
    summary="Listar todos los Usuarios",
)
def read_usuarios(
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.require_admin),
) -> Any:
    """Obtiene la lista de usuarios registrados. Solo administradores."""
    logger.info(f"Admin '{current_user.email}' listando usuarios.")
    return {"success": True, "data": usuario_service.get_all(db)}


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UsuarioRead],
    dependencies=[Depends(deps.require_admin)],
    summary="Obtener un Usuario por ID",
)
def read_usuario_by_id(
    user_id: PyUUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    user = usuario_service.get_or_404(db=db, id=user_id)
    return {"success": True, "data": user}


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UsuarioRead],
    summary="Actualizar un Usuario por ID",
)
def update_usuario(
    *,
    db: Session = Depends(deps.get_db),
    user_id: PyUUID,
    user_in: UsuarioUpdate,
    current_user: UsuarioModel = Depends(deps.require_admin),
) -> Any:
    """
    Actualiza la información de un usuario. Un administrador no puede
    cambiar su propio rol ni desactivarse.
    """
    logger.info(f"Admin '{current_user.email}' actualizando usuario ID: {user_id}")
    user_to_update = usuario_service.get_or_404(db, id=user_id)

    if user_to_update.id == current_user.id:
        update_data = user_in.model_dump(exclude_unset=True)
        if "rol" in update_data or update_data.get("is_active") is False:
            logger.warning(f"Admin '{current_user.email}' intentó modificar su propio rol o estado. Denegado.")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Un administrador no puede cambiar su propio rol o estado.")

    try:
        updated_user = usuario_service.update(db=db, db_obj=user_to_update, obj_in=user_in)
        db.commit()
        db.refresh(updated_user)
        logger.info(f"Usuario ID {user_id} actualizado exitosamente por '{current_user.email}'.")
        return {"success": True, "data": updated_user, "message": "Usuario actualizado exitosamente"}
    except HTTPException as http_exc:
        db.rollback()
        raise http_exc
    except IntegrityError as e:
        db.rollback()
        if not es_violacion_unicidad(e):
            raise
        logger.error(f"Error de integridad al actualizar usuario {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Correo electrónico ya registrado por otro usuario.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando usuario {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor")

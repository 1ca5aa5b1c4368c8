import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.api import deps
from app.core import security
from app.core.rate_limit import auth_rate_limit
from app.models.usuario import Usuario as UsuarioModel
from app.schemas.common import ApiResponse
from app.schemas.token import Sesion, SesionUsuario, Token
from app.services.usuario import usuario_service

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Rutas de Login ---
@router.post("/login/access-token",
             response_model=Token,
             dependencies=[Depends(auth_rate_limit)],
             summary="Iniciar sesión")
def login_access_token(
    db: Session = Depends(deps.get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """
    Endpoint de login (OAuth2 password flow). El campo `username` es el email.
    Devuelve un token JWT válido durante 24 horas.
    """
    email_attempt = form_data.username
    logger.info(f"Intento de login para usuario '{email_attempt}'")

    user = usuario_service.authenticate(db, email=email_attempt, password=form_data.password)

    if not user or not usuario_service.is_active(user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        access_token = security.create_access_token(subject=user.id)
        usuario_service.handle_successful_login(db, user=user)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error crítico al crear sesión para {user.email}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error interno del servidor")

    logger.info(f"Login exitoso para usuario '{email_attempt}'.")
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/session",
            response_model=ApiResponse[Sesion],
            summary="Sesión actual")
def read_session(
    token: str = Depends(deps.reusable_oauth2),
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """Devuelve el usuario autenticado y la fecha de expiración de su token."""
    payload = security.decode_access_token(token)
    expires = datetime.fromtimestamp(payload.exp, tz=timezone.utc) if payload and payload.exp else None
    sesion = Sesion(user=SesionUsuario.model_validate(current_user), expires=expires)
    return {"success": True, "data": sesion}

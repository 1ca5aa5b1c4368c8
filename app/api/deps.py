from typing import Generator, Iterable
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.core import permissions as perms
from app.core.security import user_has_role
from app.core import security
from app.db.session import SessionLocal

from app.models.usuario import Usuario

from app.services.usuario import usuario_service

logger = logging.getLogger(__name__)


# --- Dependencia para la Sesión de Base de Datos ---
def get_db() -> Generator[Session, None, None]:
    """Dependency para obtener la sesión de base de datos."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Dependencia para Autenticación ---
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login/access-token",
    auto_error=False,
)

def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> Usuario:
    """Obtiene el usuario actual a partir del token JWT."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No autorizado",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception

    token_data = security.decode_access_token(token)
    if not token_data or not token_data.sub:
        logger.warning("Token JWT inválido o expirado.")
        raise credentials_exception

    user = db.get(Usuario, token_data.sub)  # sub es el ID del usuario (UUID)
    if not user:
        logger.warning(f"Usuario no encontrado para ID {token_data.sub} en token válido.")
        raise credentials_exception

    return user

def get_current_active_user(
    current_user: Usuario = Depends(get_current_user),
) -> Usuario:
    """Obtiene el usuario actual y verifica que esté activo."""
    if not usuario_service.is_active(current_user):
        logger.warning(f"Acceso denegado: Usuario inactivo {current_user.email} (ID: {current_user.id}).")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autorizado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


class RoleChecker:
    """
    Clase para usar como dependencia de FastAPI para verificar roles.
    Requiere que el rol del usuario esté entre los indicados.
    """
    def __init__(self, allowed_roles: Iterable[str]):
        self.allowed_roles = set(allowed_roles)
        if not self.allowed_roles:
            raise ValueError("El conjunto de roles permitidos no puede estar vacío.")

    def __call__(self, request: Request, current_user: Usuario = Depends(get_current_active_user)) -> Usuario:
        if not user_has_role(current_user, self.allowed_roles):
            logger.warning(
                f"Acceso denegado a '{current_user.email}' (Rol: '{current_user.rol}') en '{request.url.path}'. "
                f"Roles permitidos: {self.allowed_roles}."
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permiso para realizar esta acción."
            )
        return current_user


require_admin = RoleChecker({perms.ADMIN_ROLE_NAME})
require_stock_maintenance = RoleChecker(perms.STOCK_MAINTENANCE_ROLES)

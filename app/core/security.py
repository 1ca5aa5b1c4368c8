from datetime import datetime, timedelta, timezone
from typing import Any, Union, Optional, Set, Iterable, TYPE_CHECKING

from jose import jwt, JWTError
from pydantic import ValidationError
import logging

from app.core.config import settings
from app.schemas.token import TokenPayload

if TYPE_CHECKING:
    from app.models.usuario import Usuario

logger = logging.getLogger(__name__)

ALGORITHM = settings.ALGORITHM

def create_access_token(
    subject: Union[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Crea un token de acceso JWT con el ID del usuario como `sub`.
    Por defecto expira tras `ACCESS_TOKEN_EXPIRE_MINUTES`.
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> Optional[TokenPayload]:
    """
    Decodifica un token de acceso, valida su estructura y expiración.
    Devuelve None si el token no es válido.
    """
    try:
        payload_dict = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[ALGORITHM]
        )
        return TokenPayload(**payload_dict)
    except (JWTError, ValidationError, KeyError) as e:
        logger.warning(f"Error decodificando token de acceso: {e}")
        return None


def user_has_role(user: "Usuario", allowed_roles: Union[Iterable[str], Set[str]]) -> bool:
    """Verifica si el rol del usuario está entre los permitidos."""
    if not user or not user.rol:
        return False
    return user.rol in set(allowed_roles)

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt ignora todo lo que exceda 72 bytes
_BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:_BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Compara una contraseña en texto plano contra el hash bcrypt almacenado.
    Devuelve False si el hash almacenado no es un hash bcrypt válido.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.error(f"Hash de contraseña inválido al verificar credenciales: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Genera el hash bcrypt (con salt) de una contraseña."""
    hashed = bcrypt.hashpw(_to_bytes(password), bcrypt.gensalt())
    return hashed.decode('utf-8')

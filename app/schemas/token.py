import uuid
from datetime import datetime

from pydantic import BaseModel

from app.schemas.common import CamelModel

# Schema para la respuesta del endpoint de login
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Schema para los datos contenidos dentro del JWT (payload)
class TokenPayload(BaseModel):
    sub: uuid.UUID
    exp: int | None = None

# Datos de la sesión actual
class SesionUsuario(CamelModel):
    id: uuid.UUID
    email: str
    nombre: str
    rol: str
    technician_id: str | None = None

class Sesion(CamelModel):
    user: SesionUsuario
    expires: datetime | None = None

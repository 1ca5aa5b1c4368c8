import uuid
from typing import Optional
from datetime import datetime

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.enums import RolUsuarioEnum

class UsuarioBase(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    technician_id: Optional[str] = Field(None, max_length=50, description="Identificador de técnico")
    rol: RolUsuarioEnum = RolUsuarioEnum.TECNICO

class UsuarioCreate(UsuarioBase):
    password: str = Field(..., min_length=8, max_length=128)

class UsuarioUpdate(UpdateModel):
    campos_no_nulos = ("nombre", "is_active")

    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    technician_id: Optional[str] = Field(None, max_length=50)
    rol: Optional[RolUsuarioEnum] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    is_active: Optional[bool] = None

class UsuarioRead(UsuarioBase):
    id: uuid.UUID
    is_active: bool
    ultimo_login: Optional[datetime] = None
    created_at: datetime

import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from app.models.usuario import Usuario
from app.schemas.usuario import UsuarioCreate, UsuarioUpdate

from .base_service import BaseService

# Importar utilidades de contraseña
from app.core.password import verify_password, get_password_hash

logger = logging.getLogger(__name__)

class UsuarioService(BaseService[Usuario, UsuarioCreate, UsuarioUpdate]):
    """
    Servicio para gestionar Usuarios. Incluye lógica para contraseñas y roles.
    """
    not_found_message = "Usuario no encontrado"

    def get_by_email(self, db: Session, *, email: str) -> Optional[Usuario]:
        """Obtiene un usuario por su correo electrónico."""
        statement = select(self.model).where(self.model.email == email)
        result = db.execute(statement)
        return result.scalar_one_or_none()

    def get_by_technician_id(self, db: Session, *, technician_id: str) -> Optional[Usuario]:
        statement = select(self.model).where(self.model.technician_id == technician_id)
        return db.execute(statement).scalar_one_or_none()

    def get_all(self, db: Session) -> List[Usuario]:
        statement = select(self.model).order_by(self.model.nombre, self.model.email)
        return list(db.execute(statement).scalars().all())

    def create(self, db: Session, *, obj_in: UsuarioCreate) -> Usuario:
        """
        Crea un nuevo usuario.
        NO realiza db.commit().
        """
        logger.debug(f"Intentando crear usuario: {obj_in.email}")
        if self.get_by_email(db, email=obj_in.email):
            logger.warning(f"Intento de crear usuario con email duplicado: {obj_in.email}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con ese correo electrónico.")

        if obj_in.technician_id and self.get_by_technician_id(db, technician_id=obj_in.technician_id):
            logger.warning(f"Intento de crear usuario con ID de técnico duplicado: {obj_in.technician_id}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con ese ID de técnico.")

        create_data = obj_in.model_dump(mode="json")
        plain_password = create_data.pop("password")
        create_data["hashed_password"] = get_password_hash(plain_password)

        db_obj = self.model(**create_data)

        db.add(db_obj)
        logger.info(f"Usuario '{db_obj.email}' preparado para ser creado.")
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: Usuario,
        obj_in: Union[UsuarioUpdate, Dict[str, Any]]
    ) -> Usuario:
        """
        Actualiza un usuario existente.
        NO realiza db.commit().
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(mode="json", exclude_unset=True)
        user_id = db_obj.id

        if "password" in update_data and update_data["password"]:
            plain_password = update_data.pop("password")
            update_data["hashed_password"] = get_password_hash(plain_password)
            logger.info(f"Contraseña actualizada para usuario ID {user_id}.")
        elif "password" in update_data:
            update_data.pop("password")

        if "rol" in update_data and update_data["rol"] is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="No se puede asignar un rol nulo al usuario.")

        if "email" in update_data and update_data["email"] is not None:
            if update_data["email"] != db_obj.email:
                existing_email = self.get_by_email(db, email=update_data["email"])
                if existing_email and existing_email.id != user_id:
                    logger.warning(f"Conflicto de email al actualizar ID {user_id} a '{update_data['email']}'. Ya existe.")
                    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Correo electrónico ya registrado por otro usuario.")
        elif "email" in update_data:
            update_data.pop("email")

        if update_data.get("technician_id") and update_data["technician_id"] != db_obj.technician_id:
            existing = self.get_by_technician_id(db, technician_id=update_data["technician_id"])
            if existing and existing.id != user_id:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="ID de técnico ya registrado por otro usuario.")

        updated_db_obj = super().update(db, db_obj=db_obj, obj_in=update_data)
        logger.info(f"Usuario ID {user_id} ('{updated_db_obj.email}') preparado para ser actualizado.")
        return updated_db_obj

    def authenticate(
        self, db: Session, *, email: str, password: str
    ) -> Optional[Usuario]:
        """
        Autentica a un usuario por email y contraseña.
        Devuelve None si el usuario no existe o la contraseña no coincide.
        """
        user = self.get_by_email(db, email=email)
        if not user:
            logger.warning(f"Intento de login fallido: Usuario '{email}' no encontrado.")
            return None

        if not verify_password(password, user.hashed_password):
            logger.warning(f"Intento de login fallido: Contraseña incorrecta para usuario '{email}'.")
            return None

        logger.info(f"Usuario '{email}' autenticado preliminarmente (contraseña correcta).")
        return user

    def is_active(self, user: Usuario) -> bool:
        return bool(user.is_active)

    def handle_successful_login(self, db: Session, *, user: Usuario) -> None:
        """
        Actualiza la fecha de último login.
        NO realiza db.commit().
        """
        user.ultimo_login = datetime.now(timezone.utc)
        db.add(user)
        logger.info(f"Campos de login exitoso preparados para {user.email}.")

    def remove(self, db: Session, *, id: Union[UUID, int]) -> Usuario:
        """
        Elimina un usuario.
        NO realiza db.commit().
        """
        db_obj = self.get_or_404(db, id=id)
        email_eliminado = db_obj.email
        db.delete(db_obj)
        logger.warning(f"Usuario '{email_eliminado}' (ID: {id}) preparado para ser eliminado.")
        return db_obj


usuario_service = UsuarioService(Usuario)

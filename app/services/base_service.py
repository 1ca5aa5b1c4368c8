import logging
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union
from uuid import UUID

from fastapi import HTTPException, status
from pydantic import BaseModel

from sqlalchemy.orm import Session
from sqlalchemy import func, select, Select

from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)

class BaseService(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    # Mensaje del 404 de get_or_404; cada servicio lo redefine en español
    not_found_message: Optional[str] = None

    def __init__(self, model: Type[ModelType]):
        """
        Servicio base con operaciones CRUD por defecto.
        Los métodos CUD (Create, Update, Delete) NO realizan commit.
        El commit debe ser manejado en la capa de la ruta (endpoint).

        **Parámetros**

        * `model`: Clase del modelo SQLAlchemy
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """Obtiene un registro por ID."""
        return db.get(self.model, id)

    def get_or_404(self, db: Session, id: Any) -> ModelType:
        """Obtiene un registro por ID o lanza 404 si no existe."""
        db_obj = self.get(db, id=id)
        if not db_obj:
            logger.warning(f"Registro no encontrado en {self.model.__name__} con ID: {id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=self.not_found_message or f"{self.model.__name__} con ID {id} no encontrado."
            )
        return db_obj

    def paginate(
        self, db: Session, statement: Select, *, page: int = 1, limit: int = 10
    ) -> Tuple[List[ModelType], int]:
        """
        Ejecuta `statement` paginado (páginas desde 1).
        Devuelve los registros de la página y el total sin paginar.
        """
        total = db.execute(
            select(func.count()).select_from(statement.order_by(None).subquery())
        ).scalar_one()
        items = db.execute(statement.offset((page - 1) * limit).limit(limit)).scalars().all()
        return list(items), total

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Crea un nuevo registro.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        logger.info(f"Nuevo registro preparado para creación en {self.model.__name__} con datos: {obj_in_data}")
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Actualiza un objeto existente en la base de datos.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            # exclude_unset para no sobrescribir campos no enviados con None
            update_data = obj_in.model_dump(exclude_unset=True)

        obj_id = getattr(db_obj, 'id', 'N/A')
        logger.debug(f"Actualizando {self.model.__name__} ID {obj_id} con datos: {update_data}")

        if update_data:
            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
                else:
                    logger.warning(f"Intento de actualizar campo '{field}' inexistente en modelo {self.model.__name__}")
            db.add(db_obj)
            logger.info(f"Registro preparado para actualización en {self.model.__name__} (ID: {obj_id})")
        else:
            logger.info(f"No se proporcionaron datos para actualizar en {self.model.__name__} (ID: {obj_id})")

        return db_obj

    def remove(self, db: Session, *, id: Union[UUID, int]) -> ModelType:
        """
        Elimina un registro por ID.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        obj = self.get_or_404(db, id=id)
        obj_id_log = getattr(obj, 'id', 'N/A')
        db.delete(obj)
        logger.warning(f"Registro preparado para eliminación de {self.model.__name__} (ID: {obj_id_log})")
        return obj

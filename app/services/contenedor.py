import logging
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Type, Union

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .base_service import BaseService, ModelType, CreateSchemaType, UpdateSchemaType
from .codigo import generar_codigo

logger = logging.getLogger(__name__)


class ContenedorService(BaseService[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Servicio común de los niveles intermedios de la jerarquía (armarios,
    estanterías, estantes, cajones, divisiones, organizadores, cajoncitos).

    Todos cuelgan de un contenedor padre (`parent_fields`), tienen un código
    único dentro de ese padre (autogenerado con `prefijo` si no se indica) y
    no pueden eliminarse mientras contengan elementos (`hijos`).
    """
    parent_fields: Tuple[str, ...] = ()
    prefijo: Optional[str] = None
    max_por_padre: Optional[int] = None
    max_mensaje: Optional[str] = None
    duplicado_mensaje: str = "El código ya existe"
    no_eliminable_mensaje: str = "No se puede eliminar el registro porque tiene elementos asociados"
    # Campos del schema de creación que no son columnas del modelo
    campos_extra: Set[str] = set()

    def hijos(self) -> Sequence[Tuple[Type[Any], str]]:
        """Pares (modelo hijo, columna FK hacia este contenedor) que bloquean el borrado."""
        return ()

    def parent_of(self, db_obj: ModelType) -> Tuple[str, Any]:
        for field in self.parent_fields:
            value = getattr(db_obj, field)
            if value is not None:
                return field, value
        raise ValueError(f"{self.model.__name__} {getattr(db_obj, 'id', '')} no tiene contenedor padre.")

    def get_by_parent(self, db: Session, *, parent_field: str, parent_id: Any) -> List[ModelType]:
        statement = (
            select(self.model)
            .where(getattr(self.model, parent_field) == parent_id)
            .order_by(self.model.codigo)  # type: ignore[attr-defined]
        )
        return list(db.execute(statement).scalars().all())

    def get_in_parent_or_404(self, db: Session, *, id: Any, parent_field: str, parent_id: Any) -> ModelType:
        """Obtiene el registro verificando que pertenezca al contenedor indicado."""
        db_obj = self.get(db, id=id)
        if not db_obj or getattr(db_obj, parent_field) != parent_id:
            logger.warning(f"{self.model.__name__} {id} no encontrado dentro de {parent_field}={parent_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=self.not_found_message)
        return db_obj

    def count_by_parent(self, db: Session, *, parent_field: str, parent_id: Any) -> int:
        statement = select(func.count(self.model.id)).where(  # type: ignore[attr-defined]
            getattr(self.model, parent_field) == parent_id
        )
        return db.execute(statement).scalar_one()

    def codigo_en_uso(
        self, db: Session, *, parent_field: str, parent_id: Any, codigo: str, exclude_id: Any = None
    ) -> bool:
        statement = select(self.model.id).where(  # type: ignore[attr-defined]
            getattr(self.model, parent_field) == parent_id,
            self.model.codigo == codigo,  # type: ignore[attr-defined]
        )
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)  # type: ignore[attr-defined]
        return db.execute(statement).first() is not None

    def create_in(
        self, db: Session, *, parent_field: str, parent_id: Any, obj_in: CreateSchemaType
    ) -> ModelType:
        """
        Crea el registro dentro del contenedor `parent_field=parent_id`.
        NO realiza db.commit().
        """
        if self.max_por_padre is not None:
            actuales = self.count_by_parent(db, parent_field=parent_field, parent_id=parent_id)
            if actuales >= self.max_por_padre:
                logger.warning(f"Límite de {self.max_por_padre} {self.model.__tablename__} alcanzado en {parent_field}={parent_id}")  # type: ignore[attr-defined]
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=self.max_mensaje)

        data: Dict[str, Any] = obj_in.model_dump(exclude=self.campos_extra)
        codigo = (data.get("codigo") or "").strip()
        if not codigo:
            codigo = generar_codigo(db, self.model, self.prefijo or "", **{parent_field: parent_id})
        elif self.codigo_en_uso(db, parent_field=parent_field, parent_id=parent_id, codigo=codigo):
            logger.warning(f"Código duplicado '{codigo}' en {self.model.__name__} ({parent_field}={parent_id})")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=self.duplicado_mensaje)

        data["codigo"] = codigo
        data[parent_field] = parent_id
        return super().create(db, obj_in=data)

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        # El contenedor padre no se puede cambiar
        for field in self.parent_fields:
            update_data.pop(field, None)

        nuevo_codigo = update_data.get("codigo")
        if nuevo_codigo and nuevo_codigo != db_obj.codigo:  # type: ignore[attr-defined]
            parent_field, parent_id = self.parent_of(db_obj)
            if self.codigo_en_uso(
                db, parent_field=parent_field, parent_id=parent_id, codigo=nuevo_codigo, exclude_id=db_obj.id  # type: ignore[attr-defined]
            ):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=self.duplicado_mensaje)
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def tiene_contenido(self, db: Session, *, db_obj: ModelType) -> bool:
        for modelo_hijo, columna in self.hijos():
            statement = select(func.count()).select_from(modelo_hijo).where(
                getattr(modelo_hijo, columna) == db_obj.id  # type: ignore[attr-defined]
            )
            if db.execute(statement).scalar_one() > 0:
                return True
        return False

    def remove(self, db: Session, *, id: Any) -> ModelType:
        """
        Elimina el registro si no contiene elementos; si los tiene lanza 409.
        NO realiza db.commit().
        """
        db_obj = self.get_or_404(db, id=id)
        if self.tiene_contenido(db, db_obj=db_obj):
            logger.warning(f"Eliminación bloqueada de {self.model.__name__} {id}: tiene elementos asociados.")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=self.no_eliminable_mensaje)
        db.delete(db_obj)
        logger.warning(f"Registro preparado para eliminación de {self.model.__name__} (ID: {id})")
        return db_obj

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.ubicacion import Ubicacion
from app.models.armario import Armario
from app.models.estanteria import Estanteria
from app.schemas.ubicacion import UbicacionCreate, UbicacionUpdate

from .base_service import BaseService
from .codigo import codigo_ubicacion

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "codigo": Ubicacion.codigo,
    "nombre": Ubicacion.nombre,
    "createdAt": Ubicacion.created_at,
}


class UbicacionService(BaseService[Ubicacion, UbicacionCreate, UbicacionUpdate]):
    """
    Servicio para las ubicaciones raíz de la jerarquía de almacenamiento.
    """
    not_found_message = "Ubicación no encontrada"

    def get_by_codigo(self, db: Session, *, codigo: str) -> Optional[Ubicacion]:
        statement = select(Ubicacion).where(Ubicacion.codigo == codigo)
        return db.execute(statement).scalar_one_or_none()

    def search(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        sort_by: str = "codigo",
        sort_order: str = "asc",
    ) -> Tuple[List[Ubicacion], int]:
        statement = select(Ubicacion)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(
                Ubicacion.codigo.ilike(pattern),
                Ubicacion.nombre.ilike(pattern),
                Ubicacion.descripcion.ilike(pattern),
            ))
        if is_active is not None:
            statement = statement.where(Ubicacion.is_active == is_active)
        column = SORT_FIELDS.get(sort_by, Ubicacion.codigo)
        statement = statement.order_by(column.desc() if sort_order == "desc" else column.asc(), Ubicacion.id)
        return self.paginate(db, statement, page=page, limit=limit)

    def create(self, db: Session, *, obj_in: Union[UbicacionCreate, Dict[str, Any]]) -> Ubicacion:
        """
        Crea una ubicación. Sin código se asigna `LOC<timestamp>`.
        NO realiza db.commit().
        """
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        codigo = (data.get("codigo") or "").strip()
        if not codigo:
            codigo = codigo_ubicacion()
        elif self.get_by_codigo(db, codigo=codigo):
            logger.warning(f"Intento de crear ubicación con código duplicado: {codigo}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de ubicación ya existe")
        data["codigo"] = codigo
        return super().create(db, obj_in=data)

    def update(
        self,
        db: Session,
        *,
        db_obj: Ubicacion,
        obj_in: Union[UbicacionUpdate, Dict[str, Any]]
    ) -> Ubicacion:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        nuevo_codigo = update_data.get("codigo")
        if nuevo_codigo and nuevo_codigo != db_obj.codigo:
            existing = self.get_by_codigo(db, codigo=nuevo_codigo)
            if existing and existing.id != db_obj.id:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código de ubicación ya existe")
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def remove(self, db: Session, *, id: Any) -> Ubicacion:
        """
        Elimina la ubicación si no tiene armarios ni estanterías.
        NO realiza db.commit().
        """
        ubicacion = self.get_or_404(db, id=id)
        hijos = db.execute(select(func.count(Armario.id)).where(Armario.ubicacion_id == ubicacion.id)).scalar_one()
        hijos += db.execute(select(func.count(Estanteria.id)).where(Estanteria.ubicacion_id == ubicacion.id)).scalar_one()
        if hijos:
            logger.warning(f"Eliminación bloqueada de ubicación {id}: tiene {hijos} armarios/estanterías.")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No se puede eliminar la ubicación porque tiene armarios o estanterías asociadas",
            )
        db.delete(ubicacion)
        logger.warning(f"Ubicación '{ubicacion.codigo}' (ID: {id}) preparada para eliminación.")
        return ubicacion


ubicacion_service = UbicacionService(Ubicacion)

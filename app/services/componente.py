import logging
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.cajoncito import Cajoncito
from app.models.componente import Componente
from app.models.componente_ubicacion import ComponenteUbicacion
from app.schemas.componente import (
    ComponenteCreate, ComponenteUpdate, ComponenteUbicacionCreate, ComponenteUbicacionIn,
    ComponenteUbicacionUpdate, validar_por_categoria,
)

from .base_service import BaseService

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "categoria": Componente.categoria,
    "descripcion": Componente.descripcion,
    "createdAt": Componente.created_at,
}

YA_ASOCIADO = "El componente ya está asociado a este cajoncito"


class ComponenteService(BaseService[Componente, ComponenteCreate, ComponenteUpdate]):
    """
    Servicio para gestionar Componentes electrónicos y sus cantidades por cajoncito.
    El stock de un componente se calcula siempre a partir de sus ubicaciones.
    """
    not_found_message = "Componente no encontrado"

    def get_active_or_404(self, db: Session, id: UUID) -> Componente:
        componente = self.get(db, id=id)
        if not componente or not componente.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=self.not_found_message)
        return componente

    def search(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        categoria: Optional[str] = None,
        sort_by: str = "categoria",
        sort_order: str = "asc",
    ) -> Tuple[List[Componente], int]:
        statement = select(Componente).where(Componente.is_active.is_(True))
        if search:
            statement = statement.where(Componente.descripcion.ilike(f"%{search}%"))
        if categoria:
            statement = statement.where(Componente.categoria == categoria)
        column = SORT_FIELDS.get(sort_by, Componente.categoria)
        statement = statement.order_by(
            column.desc() if sort_order == "desc" else column.asc(), Componente.descripcion, Componente.id
        )
        return self.paginate(db, statement, page=page, limit=limit)

    def _cajoncito_or_404(self, db: Session, cajoncito_id: UUID) -> Cajoncito:
        cajoncito = db.get(Cajoncito, cajoncito_id)
        if not cajoncito:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cajoncito no encontrado")
        return cajoncito

    def _asignar_ubicaciones(self, db: Session, componente: Componente, ubicaciones: List[ComponenteUbicacionIn]) -> None:
        vistos = set()
        for item in ubicaciones:
            if item.cajoncito_id in vistos:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=YA_ASOCIADO)
            vistos.add(item.cajoncito_id)
            self._cajoncito_or_404(db, item.cajoncito_id)
            componente.ubicaciones.append(ComponenteUbicacion(cajoncito_id=item.cajoncito_id, cantidad=item.cantidad))

    def create(self, db: Session, *, obj_in: ComponenteCreate) -> Componente:
        """
        Crea el componente y sus cantidades por cajoncito.
        NO realiza db.commit().
        """
        data = obj_in.model_dump(mode="json", exclude={"ubicaciones"})
        componente = super().create(db, obj_in=data)
        self._asignar_ubicaciones(db, componente, obj_in.ubicaciones)
        return componente

    def update(
        self,
        db: Session,
        *,
        db_obj: Componente,
        obj_in: Union[ComponenteUpdate, Dict[str, Any]]
    ) -> Componente:
        """
        Las reglas de categoría se validan sobre el resultado combinado
        (categoría y valores nuevos o existentes). NO realiza db.commit().
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(mode="json", exclude_unset=True)

        categoria = update_data.get("categoria") or db_obj.categoria
        valores = update_data.get("valor_unidad") or db_obj.valor_unidad
        errores = validar_por_categoria(categoria, valores)
        if errores:
            logger.warning(f"Validación de categoría fallida para componente {db_obj.id}: {errores}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Datos inválidos", "details": errores},
            )
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def soft_delete(self, db: Session, *, db_obj: Componente) -> Componente:
        """Marca el componente como inactivo. NO realiza db.commit()."""
        db_obj.is_active = False
        db.add(db_obj)
        logger.warning(f"Componente {db_obj.codigo} marcado como inactivo.")
        return db_obj

    # --- Ubicaciones del componente ---

    def get_ubicacion_or_404(self, componente: Componente, assoc_id: UUID) -> ComponenteUbicacion:
        for asociacion in componente.ubicaciones:
            if asociacion.id == assoc_id:
                return asociacion
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asociación no encontrada")

    def add_ubicacion(
        self, db: Session, *, componente: Componente, obj_in: ComponenteUbicacionCreate
    ) -> ComponenteUbicacion:
        """NO realiza db.commit()."""
        self._cajoncito_or_404(db, obj_in.cajoncito_id)
        if any(a.cajoncito_id == obj_in.cajoncito_id for a in componente.ubicaciones):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=YA_ASOCIADO)
        asociacion = ComponenteUbicacion(cajoncito_id=obj_in.cajoncito_id, cantidad=obj_in.cantidad)
        componente.ubicaciones.append(asociacion)
        db.add(asociacion)
        logger.info(f"Componente {componente.id} ubicado en cajoncito {obj_in.cajoncito_id} (cantidad {obj_in.cantidad}).")
        return asociacion

    def update_ubicacion(
        self, db: Session, *, componente: Componente, assoc_id: UUID, obj_in: ComponenteUbicacionUpdate
    ) -> ComponenteUbicacion:
        """NO realiza db.commit()."""
        asociacion = self.get_ubicacion_or_404(componente, assoc_id)
        asociacion.cantidad = obj_in.cantidad
        db.add(asociacion)
        return asociacion

    def remove_ubicacion(self, db: Session, *, componente: Componente, assoc_id: UUID) -> ComponenteUbicacion:
        """NO realiza db.commit()."""
        asociacion = self.get_ubicacion_or_404(componente, assoc_id)
        componente.ubicaciones.remove(asociacion)
        logger.warning(f"Cajoncito {asociacion.cajoncito_id} retirado del componente {componente.id}.")
        return asociacion


componente_service = ComponenteService(Componente)

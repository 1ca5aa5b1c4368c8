import logging
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.equipo import Equipo
from app.models.repuesto import Repuesto
from app.models.repuesto_equipo import RepuestoEquipo
from app.models.repuesto_ubicacion import LOCATION_COLUMNS, RepuestoUbicacion
from app.schemas.repuesto import (
    RepuestoCreate, RepuestoUpdate, RepuestoUbicacionCreate, RepuestoUbicacionUpdate, UbicacionCantidad,
)

from .base_service import BaseService
from .jerarquia import get_nodo_or_404
from .stock import stock_service

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "codigo": Repuesto.codigo,
    "nombre": Repuesto.nombre,
    "stockActual": Repuesto.stock_actual,
    "createdAt": Repuesto.created_at,
}

ASOCIACION_NO_ENCONTRADA = "Asociación no encontrada"


class RepuestoService(BaseService[Repuesto, RepuestoCreate, RepuestoUpdate]):
    """
    Servicio para gestionar Repuestos, su stock distribuido por ubicaciones
    y su asociación técnica con equipos.

    Toda modificación de `repuesto_ubicaciones` recalcula `stock_actual` en la
    misma transacción.
    """
    not_found_message = "Repuesto no encontrado"

    def get_active_or_404(self, db: Session, id: UUID) -> Repuesto:
        repuesto = self.get(db, id=id)
        if not repuesto or not repuesto.is_active:
            logger.warning(f"Repuesto activo con ID {id} no encontrado.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=self.not_found_message)
        return repuesto

    def get_by_codigo(self, db: Session, *, codigo: str) -> Optional[Repuesto]:
        return db.execute(select(Repuesto).where(Repuesto.codigo == codigo)).scalar_one_or_none()

    def search(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        categoria: Optional[str] = None,
        sort_by: str = "codigo",
        sort_order: str = "asc",
    ) -> Tuple[List[Repuesto], int]:
        statement = select(Repuesto).where(Repuesto.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(
                Repuesto.codigo.ilike(pattern),
                Repuesto.nombre.ilike(pattern),
                Repuesto.descripcion.ilike(pattern),
                Repuesto.marca.ilike(pattern),
                Repuesto.modelo.ilike(pattern),
                Repuesto.numero_parte.ilike(pattern),
                Repuesto.categoria.ilike(pattern),
            ))
        if categoria:
            statement = statement.where(Repuesto.categoria == categoria)
        column = SORT_FIELDS.get(sort_by, Repuesto.codigo)
        statement = statement.order_by(column.desc() if sort_order == "desc" else column.asc(), Repuesto.id)
        return self.paginate(db, statement, page=page, limit=limit)

    def validate_code(self, db: Session, *, codigo: str, exclude_id: Optional[UUID] = None) -> Optional[Repuesto]:
        """Devuelve el repuesto que ya usa `codigo` (ignorando `exclude_id`), o None si está libre."""
        existing = self.get_by_codigo(db, codigo=codigo)
        if existing and existing.id != exclude_id:
            return existing
        return None

    def _nueva_ubicacion(self, db: Session, tipo: str, nodo_id: UUID, cantidad: int) -> RepuestoUbicacion:
        get_nodo_or_404(db, tipo, nodo_id)
        return RepuestoUbicacion(cantidad=cantidad, **{LOCATION_COLUMNS[tipo]: nodo_id})

    def _asignar_ubicaciones(self, db: Session, repuesto: Repuesto, ubicaciones: List[UbicacionCantidad]) -> None:
        vistas = set()
        for item in ubicaciones:
            clave = (item.tipo.value, item.id)
            if clave in vistas:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="El repuesto ya está asociado a esta ubicación",
                )
            vistas.add(clave)
            repuesto.ubicaciones.append(self._nueva_ubicacion(db, item.tipo.value, item.id, item.cantidad))

    def _asignar_equipos(self, db: Session, repuesto: Repuesto, equipo_ids: List[UUID]) -> None:
        for equipo_id in dict.fromkeys(equipo_ids):
            equipo = db.get(Equipo, equipo_id)
            if not equipo or not equipo.is_active:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Equipo no encontrado")
            repuesto.equipos.append(RepuestoEquipo(equipo_id=equipo_id))

    def create(self, db: Session, *, obj_in: RepuestoCreate) -> Repuesto:
        """
        Crea el repuesto con sus ubicaciones y equipos. El stock inicial es la
        suma de las cantidades indicadas. NO realiza db.commit().
        """
        if self.get_by_codigo(db, codigo=obj_in.codigo):
            logger.warning(f"Intento de crear repuesto con código duplicado: {obj_in.codigo}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código ya existe")

        repuesto = super().create(db, obj_in=obj_in.model_dump(exclude={"ubicaciones", "equipos"}))
        self._asignar_ubicaciones(db, repuesto, obj_in.ubicaciones)
        self._asignar_equipos(db, repuesto, obj_in.equipos)
        stock_service.recalcular_stock_repuesto(db, repuesto=repuesto)
        return repuesto

    def update(
        self,
        db: Session,
        *,
        db_obj: Repuesto,
        obj_in: Union[RepuestoUpdate, Dict[str, Any]]
    ) -> Repuesto:
        """
        Actualización parcial. Las listas `ubicaciones`/`equipos`, si se envían,
        reemplazan a las anteriores. NO realiza db.commit().
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        ubicaciones = update_data.pop("ubicaciones", None)
        equipos = update_data.pop("equipos", None)

        nuevo_codigo = update_data.get("codigo")
        if nuevo_codigo and nuevo_codigo != db_obj.codigo and self.validate_code(
            db, codigo=nuevo_codigo, exclude_id=db_obj.id
        ):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El código ya existe")

        repuesto = super().update(db, db_obj=db_obj, obj_in=update_data)

        if ubicaciones is not None:
            repuesto.ubicaciones.clear()
            db.flush()
            self._asignar_ubicaciones(db, repuesto, [UbicacionCantidad.model_validate(u) for u in ubicaciones])
        if equipos is not None:
            repuesto.equipos.clear()
            db.flush()
            self._asignar_equipos(db, repuesto, equipos)

        stock_service.recalcular_stock_repuesto(db, repuesto=repuesto)
        return repuesto

    def soft_delete(self, db: Session, *, db_obj: Repuesto) -> Repuesto:
        """
        Marca el repuesto como inactivo. Solo se permite sin stock.
        NO realiza db.commit().
        """
        if db_obj.stock_actual > 0:
            logger.warning(f"Eliminación bloqueada del repuesto '{db_obj.codigo}': stock {db_obj.stock_actual}.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "No se puede eliminar un repuesto con stock existente. "
                    "Primero debe mover o eliminar el stock de todas las ubicaciones."
                ),
            )
        db_obj.is_active = False
        db.add(db_obj)
        logger.warning(f"Repuesto '{db_obj.codigo}' (ID: {db_obj.id}) marcado como inactivo.")
        return db_obj

    # --- Ubicaciones del repuesto ---

    def get_ubicacion_or_404(self, repuesto: Repuesto, assoc_id: UUID) -> RepuestoUbicacion:
        for asociacion in repuesto.ubicaciones:
            if asociacion.id == assoc_id:
                return asociacion
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ASOCIACION_NO_ENCONTRADA)

    def add_ubicacion(self, db: Session, *, repuesto: Repuesto, obj_in: RepuestoUbicacionCreate) -> RepuestoUbicacion:
        """NO realiza db.commit()."""
        data = obj_in.model_dump()
        indicadas = [(tipo, data[columna]) for tipo, columna in LOCATION_COLUMNS.items() if data.get(columna)]
        if len(indicadas) != 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Debe especificar exactamente un tipo de ubicación para el repuesto",
            )
        tipo, nodo_id = indicadas[0]
        if any(getattr(a, LOCATION_COLUMNS[tipo]) == nodo_id for a in repuesto.ubicaciones):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El repuesto ya está asociado a esta ubicación",
            )
        asociacion = self._nueva_ubicacion(db, tipo, nodo_id, obj_in.cantidad)
        repuesto.ubicaciones.append(asociacion)
        stock_service.recalcular_stock_repuesto(db, repuesto=repuesto)
        logger.info(f"Repuesto '{repuesto.codigo}' ubicado en {tipo} {nodo_id} (cantidad {obj_in.cantidad}).")
        return asociacion

    def update_ubicacion(
        self, db: Session, *, repuesto: Repuesto, assoc_id: UUID, obj_in: RepuestoUbicacionUpdate
    ) -> RepuestoUbicacion:
        """NO realiza db.commit()."""
        asociacion = self.get_ubicacion_or_404(repuesto, assoc_id)
        asociacion.cantidad = obj_in.cantidad
        db.add(asociacion)
        stock_service.recalcular_stock_repuesto(db, repuesto=repuesto)
        return asociacion

    def remove_ubicacion(self, db: Session, *, repuesto: Repuesto, assoc_id: UUID) -> RepuestoUbicacion:
        """NO realiza db.commit()."""
        asociacion = self.get_ubicacion_or_404(repuesto, assoc_id)
        repuesto.ubicaciones.remove(asociacion)
        stock_service.recalcular_stock_repuesto(db, repuesto=repuesto)
        logger.warning(f"Ubicación {assoc_id} retirada del repuesto '{repuesto.codigo}'.")
        return asociacion

    # --- Equipos del repuesto ---

    def get_equipos(self, repuesto: Repuesto) -> List[RepuestoEquipo]:
        return [a for a in repuesto.equipos if a.equipo.is_active]

    def add_equipos(self, db: Session, *, repuesto: Repuesto, equipo_ids: List[UUID]) -> int:
        """Asocia los equipos indicados, ignorando los ya asociados. NO realiza db.commit()."""
        actuales = {a.equipo_id for a in repuesto.equipos}
        nuevos = [equipo_id for equipo_id in dict.fromkeys(equipo_ids) if equipo_id not in actuales]
        self._asignar_equipos(db, repuesto, nuevos)
        logger.info(f"{len(nuevos)} equipos asociados al repuesto '{repuesto.codigo}'.")
        return len(nuevos)

    def remove_equipos(self, db: Session, *, repuesto: Repuesto, equipo_ids: List[UUID]) -> int:
        """NO realiza db.commit()."""
        quitar = [a for a in repuesto.equipos if a.equipo_id in set(equipo_ids)]
        for asociacion in quitar:
            repuesto.equipos.remove(asociacion)
        logger.info(f"{len(quitar)} equipos desasociados del repuesto '{repuesto.codigo}'.")
        return len(quitar)


repuesto_service = RepuestoService(Repuesto)

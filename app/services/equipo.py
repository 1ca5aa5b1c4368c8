import logging
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.equipo import Equipo
from app.models.repuesto import Repuesto
from app.models.repuesto_equipo import RepuestoEquipo
from app.schemas.equipo import EquipoCreate, EquipoUpdate, EquipoRepuestoCreate

from .base_service import BaseService

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "codigo": Equipo.codigo,
    "nombre": Equipo.nombre,
    "createdAt": Equipo.created_at,
}


class EquipoService(BaseService[Equipo, EquipoCreate, EquipoUpdate]):
    """
    Servicio para gestionar Equipos y su relación técnica con repuestos.
    """
    not_found_message = "Equipo no encontrado"

    def get_active_or_404(self, db: Session, id: UUID) -> Equipo:
        equipo = self.get(db, id=id)
        if not equipo or not equipo.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=self.not_found_message)
        return equipo

    def get_by_codigo(self, db: Session, *, codigo: str) -> Optional[Equipo]:
        return db.execute(select(Equipo).where(Equipo.codigo == codigo)).scalar_one_or_none()

    def get_by_sap(self, db: Session, *, sap: str) -> Optional[Equipo]:
        return db.execute(select(Equipo).where(Equipo.sap == sap)).scalar_one_or_none()

    def search(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: str = "codigo",
        sort_order: str = "asc",
    ) -> Tuple[List[Equipo], int]:
        statement = select(Equipo).where(Equipo.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(
                Equipo.codigo.ilike(pattern),
                Equipo.sap.ilike(pattern),
                Equipo.nombre.ilike(pattern),
                Equipo.descripcion.ilike(pattern),
                Equipo.marca.ilike(pattern),
                Equipo.modelo.ilike(pattern),
                Equipo.numero_serie.ilike(pattern),
            ))
        column = SORT_FIELDS.get(sort_by, Equipo.codigo)
        statement = statement.order_by(column.desc() if sort_order == "desc" else column.asc(), Equipo.id)
        return self.paginate(db, statement, page=page, limit=limit)

    def _validar_unicos(self, db: Session, *, codigo: Optional[str], sap: Optional[str], exclude_id: Any = None) -> None:
        if codigo:
            existing = self.get_by_codigo(db, codigo=codigo)
            if existing and existing.id != exclude_id:
                logger.warning(f"Código de equipo duplicado: {codigo}")
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"El código '{codigo}' ya está en uso")
        if sap:
            existing = self.get_by_sap(db, sap=sap)
            if existing and existing.id != exclude_id:
                logger.warning(f"SAP de equipo duplicado: {sap}")
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"El SAP '{sap}' ya está en uso")

    def _repuesto_or_404(self, db: Session, repuesto_id: UUID) -> Repuesto:
        repuesto = db.get(Repuesto, repuesto_id)
        if not repuesto or not repuesto.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Repuesto no encontrado")
        return repuesto

    def create(self, db: Session, *, obj_in: EquipoCreate) -> Equipo:
        """
        Crea el equipo y sus asociaciones con repuestos en la misma transacción.
        NO realiza db.commit().
        """
        self._validar_unicos(db, codigo=obj_in.codigo, sap=obj_in.sap)
        data = obj_in.model_dump(exclude={"repuestos"})
        if not data.get("sap"):
            data["sap"] = None
        equipo = super().create(db, obj_in=data)

        vistos = set()
        for item in obj_in.repuestos:
            if item.repuesto_id in vistos:
                continue
            vistos.add(item.repuesto_id)
            self._repuesto_or_404(db, item.repuesto_id)
            equipo.repuestos.append(RepuestoEquipo(repuesto_id=item.repuesto_id, cantidad=item.cantidad))
        return equipo

    def update(
        self,
        db: Session,
        *,
        db_obj: Equipo,
        obj_in: Union[EquipoUpdate, Dict[str, Any]]
    ) -> Equipo:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if "sap" in update_data and not update_data["sap"]:
            update_data["sap"] = None
        self._validar_unicos(
            db, codigo=update_data.get("codigo"), sap=update_data.get("sap"), exclude_id=db_obj.id
        )
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def soft_delete(self, db: Session, *, db_obj: Equipo) -> Equipo:
        """Marca el equipo como inactivo. NO realiza db.commit()."""
        db_obj.is_active = False
        db.add(db_obj)
        logger.warning(f"Equipo '{db_obj.codigo}' (ID: {db_obj.id}) marcado como inactivo.")
        return db_obj

    def get_repuestos(self, db: Session, *, equipo: Equipo) -> List[RepuestoEquipo]:
        statement = (
            select(RepuestoEquipo)
            .join(Repuesto, Repuesto.id == RepuestoEquipo.repuesto_id)
            .where(RepuestoEquipo.equipo_id == equipo.id, Repuesto.is_active.is_(True))
            .order_by(Repuesto.codigo)
        )
        return list(db.execute(statement).scalars().all())

    def add_repuesto(self, db: Session, *, equipo: Equipo, obj_in: EquipoRepuestoCreate) -> RepuestoEquipo:
        """
        Asocia técnicamente un repuesto al equipo (no modifica el stock).
        NO realiza db.commit().
        """
        self._repuesto_or_404(db, obj_in.repuesto_id)
        statement = select(RepuestoEquipo).where(
            RepuestoEquipo.equipo_id == equipo.id, RepuestoEquipo.repuesto_id == obj_in.repuesto_id
        )
        if db.execute(statement).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La asociación ya existe")
        asociacion = RepuestoEquipo(equipo_id=equipo.id, repuesto_id=obj_in.repuesto_id, cantidad=obj_in.cantidad)
        db.add(asociacion)
        logger.info(f"Repuesto {obj_in.repuesto_id} asociado al equipo '{equipo.codigo}'.")
        return asociacion


equipo_service = EquipoService(Equipo)

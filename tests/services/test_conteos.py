from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from app.models import Armario, Cajon, Division, Repuesto, RepuestoUbicacion, Ubicacion


def test_conteos_sin_cargar_colecciones(db: Session, test_cajon: Cajon, test_division: Division, test_repuesto: Repuesto):
    db.add(RepuestoUbicacion(repuesto_id=test_repuesto.id, cajon_id=test_cajon.id, cantidad=2))
    db.commit()
    db.expire_all()

    ubicacion = db.execute(select(Ubicacion)).scalar_one()
    assert ubicacion.conteos == {"armarios": 1, "estanterias": 0}
    # Los hijos no se cargan para calcular el conteo
    assert "armarios" not in inspect(ubicacion).dict

    cajon = db.get(Cajon, test_cajon.id)
    assert cajon.conteos == {"divisiones": 1, "repuestos": 1}
    assert "divisiones" not in inspect(cajon).dict
    assert "repuesto_ubicaciones" not in inspect(cajon).dict

def test_conteos_se_actualizan_al_refrescar(db: Session, test_armario: Armario):
    armario = db.get(Armario, test_armario.id)
    assert armario.conteos["cajones"] == 0

    db.add(Cajon(codigo="CAJ-010", nombre="Cajón 10", armario_id=armario.id))
    db.commit()
    db.refresh(armario)
    assert armario.conteos == {"cajones": 1, "organizadores": 0, "repuestos": 0}

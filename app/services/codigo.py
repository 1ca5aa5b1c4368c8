import logging
import re
import time
from typing import Any, Iterable, Type

from sqlalchemy import select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def next_codigo(existing_codes: Iterable[str], prefix: str) -> str:
    """
    Siguiente código secuencial `PREFIX-NNN` a partir de los códigos existentes.

    Solo cuentan los códigos con el formato exacto `PREFIX-` seguido de tres
    dígitos; el resto se ignora. Sin coincidencias se empieza en `PREFIX-001`.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d{{3}})$")
    numbers = [int(m.group(1)) for m in (pattern.match(code or "") for code in existing_codes) if m]
    return f"{prefix}-{(max(numbers) + 1 if numbers else 1):03d}"


def generar_codigo(db: Session, model: Type[Any], prefix: str, **parent_filter: Any) -> str:
    """Genera el siguiente código de `model` dentro del contenedor indicado en `parent_filter`."""
    statement = select(model.codigo).filter_by(**parent_filter)
    codes = db.execute(statement).scalars().all()
    codigo = next_codigo(codes, prefix)
    logger.debug(f"Código generado para {model.__name__} ({parent_filter}): {codigo}")
    return codigo


def codigo_ubicacion() -> str:
    """Código por defecto de una ubicación: `LOC` + marca de tiempo en milisegundos."""
    return f"LOC{int(time.time() * 1000)}"

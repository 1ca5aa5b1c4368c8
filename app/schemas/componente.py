import uuid
from typing import Any, Dict, List, Optional
from datetime import datetime

from pydantic import Field, model_validator

from app.schemas.common import CamelModel, UpdateModel
from app.schemas.enums import CategoriaComponenteEnum
from app.schemas.referencias import NodoUbicacion

# Reglas por categoría: máximo de pares, unidades permitidas (coincidencia por
# subcadena sin distinguir mayúsculas) y unidades de las que se exige al menos una.
REGLAS_CATEGORIA: Dict[str, Dict[str, Any]] = {
    "RESISTENCIA": {
        "max_valores": 5,
        "unidades": ["Ω", "kΩ", "MΩ", "W", "%", "ppm", "T°"],
        "requeridas": ["Ω"],
        "mensaje": "Las resistencias deben especificar el valor en ohmios (Ω, kΩ, MΩ)",
        # Valores decimales solo junto a una unidad en ohmios
        "decimal_requiere": "Ω",
        "mensaje_decimal": "El valor de resistencia debe ser numérico",
    },
    "CAPACITOR": {
        "max_valores": 4,
        "unidades": ["pF", "nF", "µF", "mF", "F", "V", "tolerance"],
        "requeridas": ["pF", "nF", "µF", "mF", "F"],
        "mensaje": "Los capacitores deben especificar la capacitancia (pF, nF, µF, mF, F)",
    },
    "INTEGRADO": {
        "max_valores": 8,
        "unidades": ["pines", "MHz", "V", "mA", "W", "package", "temp", "°C"],
        "requeridas": ["V"],
        "mensaje": "Los circuitos integrados deben especificar el voltaje de operación",
    },
    "VENTILADOR": {
        "max_valores": 6,
        "unidades": ["V", "mA", "RPM", "CFM", "m³/h", "dB", "mm"],
        "requeridas": ["V"],
        "mensaje": "Los ventiladores deben especificar el voltaje de operación",
    },
    "OTROS": {
        "max_valores": 10,
        "unidades": ["V", "A", "W", "Hz", "Ω", "F", "H", "m", "mm", "°C", "%"],
        "requeridas": [],
        "mensaje": None,
    },
}


def validar_por_categoria(categoria: str, valores: List[Dict[str, str]]) -> List[str]:
    """Devuelve la lista de errores de los pares valor/unidad para la categoría dada."""
    reglas = REGLAS_CATEGORIA.get(categoria)
    if not reglas:
        return []

    errores: List[str] = []
    if len(valores) > reglas["max_valores"]:
        errores.append(f"{categoria} no debe tener más de {reglas['max_valores']} especificaciones")

    no_permitidas = [
        par["unidad"] for par in valores
        if not any(permitida.lower() in par["unidad"].lower() for permitida in reglas["unidades"])
    ]
    if no_permitidas:
        errores.append(f"Unidades no permitidas para {categoria}: {', '.join(no_permitidas)}")

    if reglas["requeridas"] and not any(
        requerida in par["unidad"] for par in valores for requerida in reglas["requeridas"]
    ):
        errores.append(reglas["mensaje"])

    decimal_requiere = reglas.get("decimal_requiere")
    if decimal_requiere and any(
        "." in par["valor"] and decimal_requiere not in par["unidad"] for par in valores
    ):
        errores.append(reglas["mensaje_decimal"])

    return errores


class ValorUnidad(CamelModel):
    valor: str = Field(..., min_length=1, max_length=50)
    unidad: str = Field(..., min_length=1, max_length=50)


class ComponenteUbicacionIn(CamelModel):
    cajoncito_id: uuid.UUID
    cantidad: int = Field(..., ge=1, le=999999)


# --- Schema Base ---
class ComponenteBase(CamelModel):
    categoria: CategoriaComponenteEnum
    descripcion: str = Field(..., min_length=1, max_length=500)
    valor_unidad: List[ValorUnidad] = Field(..., min_length=1, max_length=10)
    stock_minimo: int = Field(0, ge=0, le=999999)

# --- Schema para Creación ---
class ComponenteCreate(ComponenteBase):
    ubicaciones: List[ComponenteUbicacionIn] = []

    @model_validator(mode="after")
    def check_reglas_categoria(self) -> "ComponenteCreate":
        errores = validar_por_categoria(
            self.categoria.value, [v.model_dump() for v in self.valor_unidad]
        )
        if errores:
            raise ValueError("; ".join(errores))
        return self

# --- Schema para Actualización ---
class ComponenteUpdate(UpdateModel):
    """Las reglas de categoría se validan en el servicio contra el estado combinado."""
    campos_no_nulos = ("categoria", "descripcion", "valor_unidad", "stock_minimo")

    categoria: Optional[CategoriaComponenteEnum] = None
    descripcion: Optional[str] = Field(None, min_length=1, max_length=500)
    valor_unidad: Optional[List[ValorUnidad]] = Field(None, min_length=1, max_length=10)
    stock_minimo: Optional[int] = Field(None, ge=0, le=999999)

# --- Asociaciones con cajoncitos ---
class ComponenteUbicacionCreate(ComponenteUbicacionIn):
    pass

class ComponenteUbicacionUpdate(CamelModel):
    cantidad: int = Field(..., ge=1, le=999999)

class ComponenteUbicacionRead(CamelModel):
    id: uuid.UUID
    componente_id: uuid.UUID
    cajoncito_id: uuid.UUID
    cantidad: int
    cajoncito: NodoUbicacion
    created_at: datetime

# --- Schemas para Respuesta API ---
class ComponenteRead(ComponenteBase):
    id: uuid.UUID
    stock_actual: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

class ComponenteDetalle(ComponenteRead):
    ubicaciones: List[ComponenteUbicacionRead] = []

import pytest
from pydantic import ValidationError

from app.schemas.componente import ComponenteCreate, validar_por_categoria


def test_resistencia_valida():
    valores = [{"valor": "4.7", "unidad": "kΩ"}, {"valor": "1", "unidad": "%"}]
    assert validar_por_categoria("RESISTENCIA", valores) == []

def test_resistencia_sin_ohmios():
    errores = validar_por_categoria("RESISTENCIA", [{"valor": "1", "unidad": "W"}])
    assert errores == ["Las resistencias deben especificar el valor en ohmios (Ω, kΩ, MΩ)"]

def test_resistencia_decimal_sin_ohmios():
    valores = [{"valor": "4.7", "unidad": "kΩ"}, {"valor": "0.25", "unidad": "W"}]
    assert validar_por_categoria("RESISTENCIA", valores) == ["El valor de resistencia debe ser numérico"]

def test_resistencia_decimal_sin_ohmios_acumula_errores():
    errores = validar_por_categoria("RESISTENCIA", [{"valor": "0.5", "unidad": "W"}])
    assert errores == [
        "Las resistencias deben especificar el valor en ohmios (Ω, kΩ, MΩ)",
        "El valor de resistencia debe ser numérico",
    ]

def test_capacitor_unidad_no_permitida():
    errores = validar_por_categoria(
        "CAPACITOR", [{"valor": "10", "unidad": "µF"}, {"valor": "5", "unidad": "RPM"}]
    )
    assert errores == ["Unidades no permitidas para CAPACITOR: RPM"]

def test_ventilador_demasiados_valores():
    valores = [{"valor": str(i), "unidad": "V"} for i in range(7)]
    errores = validar_por_categoria("VENTILADOR", valores)
    assert errores == ["VENTILADOR no debe tener más de 6 especificaciones"]

def test_integrado_requiere_voltaje():
    errores = validar_por_categoria("INTEGRADO", [{"valor": "8", "unidad": "pines"}])
    assert errores == ["Los circuitos integrados deben especificar el voltaje de operación"]

def test_otros_sin_unidad_requerida():
    assert validar_por_categoria("OTROS", [{"valor": "2", "unidad": "A"}]) == []

def test_componente_create_rechaza_reglas():
    with pytest.raises(ValidationError):
        ComponenteCreate(
            categoria="CAPACITOR",
            descripcion="Capacitor sin capacitancia",
            valorUnidad=[{"valor": "16", "unidad": "V"}],
        )

def test_componente_create_valido():
    componente = ComponenteCreate(
        categoria="RESISTENCIA",
        descripcion="Resistencia 220",
        valorUnidad=[{"valor": "220", "unidad": "Ω"}],
    )
    assert componente.stock_minimo == 0
    assert componente.ubicaciones == []

import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Cajoncito, Componente, ComponenteUbicacion

pytestmark = pytest.mark.asyncio

COMPONENTES_URL = f"{settings.API_V1_STR}/componentes"


async def test_create_componente_success(
    client: AsyncClient, auth_token_tecnico: str, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    componente_data = {
        "categoria": "CAPACITOR",
        "descripcion": "Capacitor electrolítico",
        "valorUnidad": [{"valor": "100", "unidad": "µF"}, {"valor": "25", "unidad": "V"}],
        "stockMinimo": 20,
        "ubicaciones": [{"cajoncitoId": str(test_cajoncito.id), "cantidad": 150}],
    }
    response = await client.post(COMPONENTES_URL, headers=headers, json=componente_data)
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["categoria"] == "CAPACITOR"
    assert data["stockActual"] == 150
    assert data["valorUnidad"] == componente_data["valorUnidad"]
    assert data["ubicaciones"][0]["cajoncito"]["codigo"] == test_cajoncito.codigo
    assert data["ubicaciones"][0]["cajoncito"]["tipo"] == "cajoncito"

async def test_create_resistencia_without_ohms(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    componente_data = {
        "categoria": "RESISTENCIA",
        "descripcion": "Resistencia sin valor",
        "valorUnidad": [{"valor": "2", "unidad": "W"}],
    }
    response = await client.post(COMPONENTES_URL, headers=headers, json=componente_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Datos inválidos"
    assert "ohmios" in body["details"][0]["message"]

async def test_create_componente_invalid_category(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    componente_data = {
        "categoria": "DIODO",
        "descripcion": "Categoría inexistente",
        "valorUnidad": [{"valor": "1", "unidad": "A"}],
    }
    response = await client.post(COMPONENTES_URL, headers=headers, json=componente_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_create_componente_unknown_cajoncito(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    componente_data = {
        "categoria": "OTROS",
        "descripcion": "Fusible 2A",
        "valorUnidad": [{"valor": "2", "unidad": "A"}],
        "ubicaciones": [{"cajoncitoId": "00000000-0000-0000-0000-000000000000", "cantidad": 5}],
    }
    response = await client.post(COMPONENTES_URL, headers=headers, json=componente_data)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Cajoncito no encontrado"

async def test_list_componentes_filter_by_categoria(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_componente: Componente
):
    db.add(Componente(
        categoria="VENTILADOR", descripcion="Ventilador 80mm",
        valor_unidad=[{"valor": "12", "unidad": "V"}],
    ))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(COMPONENTES_URL, headers=headers, params={"categoria": "RESISTENCIA"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    body = response.json()
    assert [c["id"] for c in body["data"]] == [str(test_componente.id)]
    assert body["pagination"]["total"] == 1

    response = await client.get(COMPONENTES_URL, headers=headers, params={"search": "ventilador"})
    assert [c["categoria"] for c in response.json()["data"]] == ["VENTILADOR"]

async def test_update_componente_validates_combined_state(
    client: AsyncClient, auth_token_tecnico: str, test_componente: Componente
):
    """Cambiar la categoría a CAPACITOR con los valores de una resistencia no es válido."""
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{COMPONENTES_URL}/{test_componente.id}", headers=headers, json={"categoria": "CAPACITOR"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Datos inválidos"
    assert any("capacitancia" in d for d in body["details"])

async def test_update_resistencia_decimal_without_ohms(
    client: AsyncClient, auth_token_tecnico: str, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{COMPONENTES_URL}/{test_componente.id}", headers=headers,
        json={"valorUnidad": [{"valor": "10", "unidad": "kΩ"}, {"valor": "0.5", "unidad": "W"}]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"] == ["El valor de resistencia debe ser numérico"]

async def test_update_componente_success(
    client: AsyncClient, auth_token_tecnico: str, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{COMPONENTES_URL}/{test_componente.id}", headers=headers,
        json={"descripcion": "Resistencia de película metálica 10k", "stockMinimo": 50},
    )
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["descripcion"] == "Resistencia de película metálica 10k"
    assert data["stockMinimo"] == 50
    assert data["categoria"] == "RESISTENCIA"

async def test_delete_componente_is_soft(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{COMPONENTES_URL}/{test_componente.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert db.get(Componente, test_componente.id).is_active is False

    response = await client.get(f"{COMPONENTES_URL}/{test_componente.id}", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Componente no encontrado"

async def test_componente_ubicaciones_crud(
    client: AsyncClient, auth_token_tecnico: str, test_componente: Componente, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    url = f"{COMPONENTES_URL}/{test_componente.id}/ubicaciones"

    response = await client.post(url, headers=headers, json={"cajoncitoId": str(test_cajoncito.id), "cantidad": 30})
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assoc_id = response.json()["data"]["id"]

    response = await client.post(url, headers=headers, json={"cajoncitoId": str(test_cajoncito.id), "cantidad": 1})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El componente ya está asociado a este cajoncito"

    response = await client.put(f"{url}/{assoc_id}", headers=headers, json={"cantidad": 12})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    response = await client.get(f"{COMPONENTES_URL}/{test_componente.id}", headers=headers)
    assert response.json()["data"]["stockActual"] == 12

    response = await client.delete(f"{url}/{assoc_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    response = await client.get(url, headers=headers)
    assert response.json()["data"] == []

async def test_componente_stock_sums_cajoncitos(
    client: AsyncClient, auth_token_tecnico: str, db: Session,
    test_componente: Componente, test_cajoncito: Cajoncito,
):
    segundo = Cajoncito(codigo="CAJ-002", nombre="Cajoncito 2", organizador_id=test_cajoncito.organizador_id)
    db.add(segundo)
    db.commit()
    db.add(ComponenteUbicacion(componente_id=test_componente.id, cajoncito_id=test_cajoncito.id, cantidad=7))
    db.add(ComponenteUbicacion(componente_id=test_componente.id, cajoncito_id=segundo.id, cantidad=5))
    db.commit()
    db.expire_all()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{COMPONENTES_URL}/{test_componente.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["stockActual"] == 12

import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Cajoncito, Componente, ComponenteUbicacion, Repuesto

pytestmark = pytest.mark.asyncio

STOCK_URL = f"{settings.API_V1_STR}/stock"


async def test_list_stock_summary(
    client: AsyncClient, auth_token_tecnico: str, test_repuesto_en_cajon: Repuesto, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(STOCK_URL, headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    summary = data["summary"]
    assert summary["totalRepuestos"] == 1
    assert summary["totalComponentes"] == 1
    assert summary["lowStockRepuestos"] == 1
    assert summary["totalItems"] == 2
    assert summary["totalPages"] == 1
    assert summary["itemType"] == "all"
    assert summary["filter"] == "all"

    repuesto = data["items"][0]
    assert repuesto["itemType"] == "repuesto"
    assert repuesto["itemCode"] == "REP-0001"
    assert repuesto["totalStock"] == 3
    assert repuesto["locations"][0]["locationType"] == "cajon"
    assert repuesto["locations"][0]["locationPath"] == "Taller Central > Armario A > Cajón 1"

async def test_list_stock_by_item_type(
    client: AsyncClient, auth_token_tecnico: str, test_repuesto: Repuesto, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(STOCK_URL, headers=headers, params={"itemType": "componente"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert [i["itemType"] for i in data["items"]] == ["componente"]
    assert data["summary"]["totalRepuestos"] == 0

    response = await client.get(STOCK_URL, headers=headers, params={"itemType": "equipo"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_list_stock_low_stock_filter(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_repuesto_en_cajon: Repuesto
):
    db.add(Repuesto(codigo="REP-0002", nombre="Correa A42", stock_minimo=0))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(STOCK_URL, headers=headers, params={"lowStock": "true"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert [i["itemCode"] for i in data["items"]] == ["REP-0001"]
    assert data["summary"]["filter"] == "low-stock"
    assert data["summary"]["itemType"] == "repuesto"

async def test_list_stock_pagination(
    client: AsyncClient, auth_token_tecnico: str, test_repuesto: Repuesto, test_componente: Componente
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(STOCK_URL, headers=headers, params={"page": 2, "limit": 1})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert [i["itemType"] for i in data["items"]] == ["componente"]
    assert data["summary"]["totalPages"] == 2
    assert data["summary"]["currentPage"] == 2

async def test_low_stock_endpoint(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_repuesto_en_cajon: Repuesto
):
    db.add(Repuesto(codigo="REP-0003", nombre="Filtro de aire", stock_minimo=2))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{STOCK_URL}/low", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    items = response.json()["data"]
    assert [i["itemCode"] for i in items] == ["REP-0001", "REP-0003"]
    assert all(i["isLowStock"] for i in items)
    assert items[0]["lowStockThreshold"] == 5

async def test_recalculate_fixes_stored_stock(
    client: AsyncClient, auth_token_supervisor: str, db: Session, test_repuesto_en_cajon: Repuesto
):
    repuesto = db.get(Repuesto, test_repuesto_en_cajon.id)
    repuesto.stock_actual = 99
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_supervisor}"}
    response = await client.post(f"{STOCK_URL}/recalculate", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    body = response.json()
    assert body["data"] == {"totalRepuestos": 1, "totalComponentes": 0, "lowStockRepuestos": 1}
    assert body["message"] == "Stock recalculado exitosamente"

    db.expire_all()
    assert db.get(Repuesto, test_repuesto_en_cajon.id).stock_actual == 3

async def test_recalculate_as_admin(client: AsyncClient, auth_token_admin: str, test_repuesto: Repuesto):
    headers = {"Authorization": f"Bearer {auth_token_admin}"}
    response = await client.post(f"{STOCK_URL}/recalculate", headers=headers, params={"itemType": "repuesto"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["data"]["totalRepuestos"] == 1

async def test_recalculate_forbidden_for_tecnico(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(f"{STOCK_URL}/recalculate", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_item_stock_componente(
    client: AsyncClient, auth_token_tecnico: str, db: Session,
    test_componente: Componente, test_cajoncito: Cajoncito,
):
    db.add(ComponenteUbicacion(componente_id=test_componente.id, cajoncito_id=test_cajoncito.id, cantidad=25))
    db.commit()
    db.expire_all()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{STOCK_URL}/componente/{test_componente.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["itemName"] == "Resistencia de carbón 10k"
    assert data["totalStock"] == 25
    assert data["isLowStock"] is False
    assert data["locations"][0]["locationType"] == "cajoncito"
    assert data["locations"][0]["locationPath"].endswith("Organizador 1 > Cajoncito 1")

async def test_item_stock_repuesto(client: AsyncClient, auth_token_tecnico: str, test_repuesto_en_cajon: Repuesto):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{STOCK_URL}/repuesto/{test_repuesto_en_cajon.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["totalStock"] == 3
    assert data["isLowStock"] is True

async def test_item_stock_invalid_type(client: AsyncClient, auth_token_tecnico: str, test_repuesto: Repuesto):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{STOCK_URL}/equipo/{test_repuesto.id}", headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Tipo de ítem inválido"

async def test_item_stock_unknown_item(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(
        f"{STOCK_URL}/repuesto/00000000-0000-0000-0000-000000000000", headers=headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Repuesto no encontrado"

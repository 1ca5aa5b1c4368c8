import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Armario, Cajoncito, Componente, ComponenteUbicacion, Estanteria, Organizador

pytestmark = pytest.mark.asyncio

API = settings.API_V1_STR


async def test_create_organizador_with_cajoncitos(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/armarios/{test_armario.id}/organizadores", headers=headers,
        json={"nombre": "Organizador SMD", "cantidadCajoncitos": 3},
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["codigo"] == "ORG-001"
    assert data["_count"] == {"cajoncitos": 3}

    response = await client.get(f"{API}/organizadores/{data['id']}/cajoncitos", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    cajoncitos = response.json()["data"]
    assert [c["codigo"] for c in cajoncitos] == ["CAJ-001", "CAJ-002", "CAJ-003"]
    assert [c["nombre"] for c in cajoncitos] == ["Cajoncito 1", "Cajoncito 2", "Cajoncito 3"]

async def test_create_organizador_in_estanteria(
    client: AsyncClient, auth_token_tecnico: str, test_estanteria: Estanteria
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/estanterias/{test_estanteria.id}/organizadores", headers=headers,
        json={"codigo": "ORG-ESP", "nombre": "Organizador especial"},
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["estanteriaId"] == str(test_estanteria.id)
    assert data["_count"] == {"cajoncitos": 0}

async def test_create_organizador_too_many_cajoncitos(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/armarios/{test_armario.id}/organizadores", headers=headers,
        json={"nombre": "Demasiados", "cantidadCajoncitos": 51},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_cajoncito_limit_per_organizador(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/armarios/{test_armario.id}/organizadores", headers=headers,
        json={"nombre": "Lleno", "cantidadCajoncitos": 50},
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    organizador_id = response.json()["data"]["id"]

    response = await client.post(
        f"{API}/organizadores/{organizador_id}/cajoncitos", headers=headers, json={"nombre": "El 51"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se pueden crear más de 50 cajoncitos por organizador"

async def test_create_cajoncito_next_code(
    client: AsyncClient, auth_token_tecnico: str, test_organizador: Organizador, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/organizadores/{test_organizador.id}/cajoncitos", headers=headers, json={"nombre": "Segundo"}
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assert response.json()["data"]["codigo"] == "CAJ-002"

async def test_create_cajoncito_duplicate_code(
    client: AsyncClient, auth_token_tecnico: str, test_organizador: Organizador, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/organizadores/{test_organizador.id}/cajoncitos", headers=headers,
        json={"codigo": test_cajoncito.codigo, "nombre": "Repetido"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El código de cajoncito ya existe en este organizador"

async def test_read_organizador_detail(
    client: AsyncClient, auth_token_tecnico: str, test_organizador: Organizador, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/organizadores/{test_organizador.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["armario"]["codigo"] == "ARM-A"
    assert data["ruta"] == "Taller Central > Armario A > Organizador 1"
    assert [c["id"] for c in data["cajoncitos"]] == [str(test_cajoncito.id)]

async def test_delete_organizador_with_cajoncitos_blocked(
    client: AsyncClient, auth_token_tecnico: str, test_organizador: Organizador, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/organizadores/{test_organizador.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se puede eliminar el organizador porque contiene cajoncitos"

async def test_search_cajoncitos(
    client: AsyncClient, auth_token_tecnico: str, test_cajoncito: Cajoncito
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/cajoncitos", headers=headers, params={"search": "cajoncito 1"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert [c["id"] for c in data] == [str(test_cajoncito.id)]
    assert data[0]["organizador"]["codigo"] == "ORG-001"
    assert data[0]["ruta"] == "Taller Central > Armario A > Organizador 1 > Cajoncito 1"

    response = await client.get(f"{API}/cajoncitos", headers=headers, params={"search": "no-existe"})
    assert response.json()["data"] == []

async def test_update_cajoncito(client: AsyncClient, auth_token_tecnico: str, test_cajoncito: Cajoncito):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{API}/cajoncitos/{test_cajoncito.id}", headers=headers,
        json={"nombre": "Resistencias 1/4W", "descripcion": "Valores E12"},
    )
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["nombre"] == "Resistencias 1/4W"
    assert data["descripcion"] == "Valores E12"

async def test_delete_cajoncito_with_componentes_blocked(
    client: AsyncClient, auth_token_tecnico: str, db: Session,
    test_cajoncito: Cajoncito, test_componente: Componente,
):
    db.add(ComponenteUbicacion(componente_id=test_componente.id, cajoncito_id=test_cajoncito.id, cantidad=10))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/cajoncitos/{test_cajoncito.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se puede eliminar el cajoncito porque contiene componentes o repuestos"

async def test_delete_empty_cajoncito(client: AsyncClient, auth_token_tecnico: str, test_cajoncito: Cajoncito):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/cajoncitos/{test_cajoncito.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["message"] == "Cajoncito eliminado exitosamente"

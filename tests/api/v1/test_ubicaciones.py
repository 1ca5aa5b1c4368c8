import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Armario, Cajon, Cajoncito, Estanteria, Organizador, Repuesto, Ubicacion

pytestmark = pytest.mark.asyncio

UBICACIONES_URL = f"{settings.API_V1_STR}/ubicaciones"


async def test_create_ubicacion_success(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    ubicacion_data = {"codigo": "LOC-PLANTA", "nombre": "Planta Norte", "descripcion": "Bodega de planta"}
    response = await client.post(UBICACIONES_URL, headers=headers, json=ubicacion_data)
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    body = response.json()
    assert body["message"] == "Ubicación creada exitosamente"
    assert body["data"]["codigo"] == "LOC-PLANTA"
    assert body["data"]["isActive"] is True
    assert body["data"]["_count"] == {"armarios": 0, "estanterias": 0}

async def test_create_ubicacion_generates_code(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(UBICACIONES_URL, headers=headers, json={"nombre": "Sin código"})
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    codigo = response.json()["data"]["codigo"]
    assert codigo.startswith("LOC")
    assert codigo[3:].isdigit()

async def test_create_ubicacion_duplicate_code(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        UBICACIONES_URL, headers=headers, json={"codigo": test_ubicacion.codigo, "nombre": "Otra"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El código de ubicación ya existe"

async def test_create_ubicacion_missing_nombre(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(UBICACIONES_URL, headers=headers, json={"codigo": "LOC-X"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Datos inválidos"

async def test_list_ubicaciones_paginated(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(UBICACIONES_URL, headers=headers, params={"search": "taller", "limit": 5})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    body = response.json()
    assert [u["codigo"] for u in body["data"]] == [test_ubicacion.codigo]
    assert body["pagination"] == {
        "page": 1, "limit": 5, "total": 1, "totalPages": 1, "hasNext": False, "hasPrev": False,
    }

async def test_list_ubicaciones_invalid_sort(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(UBICACIONES_URL, headers=headers, params={"sortBy": "descripcion"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_tree_view(
    client: AsyncClient, auth_token_tecnico: str,
    test_ubicacion: Ubicacion, test_cajoncito: Cajoncito, test_cajon: Cajon,
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(UBICACIONES_URL, headers=headers, params={"tree": "true"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    raiz = next(n for n in response.json()["data"] if n["id"] == str(test_ubicacion.id))
    assert raiz["type"] == "ubicacion"

    armario = raiz["children"][0]
    assert armario["type"] == "armario"
    tipos_hijos = sorted(h["type"] for h in armario["children"])
    assert tipos_hijos == ["cajon", "organizador"]

    organizador = next(h for h in armario["children"] if h["type"] == "organizador")
    assert organizador["children"][0]["id"] == str(test_cajoncito.id)
    assert organizador["children"][0]["type"] == "cajoncito"

async def test_tree_excludes_inactive_ubicaciones(client: AsyncClient, auth_token_tecnico: str, db):
    inactiva = Ubicacion(codigo="LOC-OFF", nombre="Cerrada", is_active=False)
    db.add(inactiva)
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(UBICACIONES_URL, headers=headers, params={"tree": "true"})
    assert response.status_code == status.HTTP_200_OK
    assert str(inactiva.id) not in {n["id"] for n in response.json()["data"]}

async def test_flat_list_by_type(
    client: AsyncClient, auth_token_tecnico: str, test_organizador: Organizador
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(UBICACIONES_URL, headers=headers, params={"type": "organizador"})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert [n["id"] for n in data] == [str(test_organizador.id)]
    assert data[0]["type"] == "organizador"
    assert data[0]["children"] == []

async def test_read_ubicacion_detail(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{UBICACIONES_URL}/{test_ubicacion.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["_count"]["armarios"] == 1
    assert data["armarios"][0]["codigo"] == test_armario.codigo

async def test_read_ubicacion_not_found(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{UBICACIONES_URL}/00000000-0000-0000-0000-000000000000", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Ubicación no encontrada"

async def test_update_ubicacion(client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{UBICACIONES_URL}/{test_ubicacion.id}", headers=headers,
        json={"nombre": "Taller Renombrado", "isActive": False},
    )
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["nombre"] == "Taller Renombrado"
    assert data["isActive"] is False
    assert data["codigo"] == test_ubicacion.codigo

async def test_delete_empty_ubicacion(client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    ubicacion_id = test_ubicacion.id
    response = await client.delete(f"{UBICACIONES_URL}/{ubicacion_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["message"] == "Ubicación eliminada exitosamente"

    response = await client.get(f"{UBICACIONES_URL}/{ubicacion_id}", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_delete_ubicacion_with_armarios_blocked(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{UBICACIONES_URL}/{test_ubicacion.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "armarios o estanterías" in response.json()["error"]


# --- Contenido de cualquier nodo ---

async def test_contents_include_children(
    client: AsyncClient, auth_token_tecnico: str,
    test_ubicacion: Ubicacion, test_repuesto_en_cajon: Repuesto, test_cajon: Cajon,
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{UBICACIONES_URL}/{test_ubicacion.id}/contents", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["locationType"] == "ubicacion"
    assert data["summary"]["totalItems"] == 1
    assert data["summary"]["repuestosCount"] == 1
    item = data["items"][0]
    assert item["itemType"] == "repuesto"
    assert item["codigo"] == test_repuesto_en_cajon.codigo
    assert item["cantidad"] == 3
    assert item["locationId"] == str(test_cajon.id)
    assert item["locationPath"] == "Taller Central > Armario A > Cajón 1"

async def test_contents_without_children(
    client: AsyncClient, auth_token_tecnico: str,
    test_armario: Armario, test_repuesto_en_cajon: Repuesto,
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(
        f"{UBICACIONES_URL}/{test_armario.id}/contents", headers=headers, params={"includeChildren": "false"}
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["locationType"] == "armario"
    assert data["items"] == []
    assert data["summary"]["totalItems"] == 0

async def test_contents_componentes_only(
    client: AsyncClient, auth_token_tecnico: str, db,
    test_organizador: Organizador, test_cajoncito: Cajoncito, test_componente, test_repuesto: Repuesto,
):
    from app.models import ComponenteUbicacion, RepuestoUbicacion
    db.add(ComponenteUbicacion(componente_id=test_componente.id, cajoncito_id=test_cajoncito.id, cantidad=40))
    db.add(RepuestoUbicacion(repuesto_id=test_repuesto.id, cajoncito_id=test_cajoncito.id, cantidad=2))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(
        f"{UBICACIONES_URL}/{test_organizador.id}/contents", headers=headers, params={"itemType": "componentes"}
    )
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["summary"]["componentesCount"] == 1
    assert data["summary"]["repuestosCount"] == 0
    assert data["items"][0]["itemType"] == "componente"
    assert data["items"][0]["cantidad"] == 40

async def test_contents_unknown_location(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(
        f"{UBICACIONES_URL}/00000000-0000-0000-0000-000000000000/contents", headers=headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


# --- Armarios y estanterías de la ubicación ---

async def test_create_armario_in_ubicacion(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{UBICACIONES_URL}/{test_ubicacion.id}/armarios", headers=headers,
        json={"codigo": "ARM-B", "nombre": "Armario B"},
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assert response.json()["data"]["ubicacionId"] == str(test_ubicacion.id)

    response = await client.get(f"{UBICACIONES_URL}/{test_ubicacion.id}/armarios", headers=headers)
    assert [a["codigo"] for a in response.json()["data"]] == ["ARM-B"]

async def test_create_armario_duplicate_code_in_same_ubicacion(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{UBICACIONES_URL}/{test_ubicacion.id}/armarios", headers=headers,
        json={"codigo": test_armario.codigo, "nombre": "Copia"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El código de armario ya existe"

async def test_create_armario_unknown_ubicacion(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{UBICACIONES_URL}/00000000-0000-0000-0000-000000000000/armarios", headers=headers,
        json={"codigo": "ARM-Z", "nombre": "Huérfano"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_create_estanteria_in_ubicacion(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{UBICACIONES_URL}/{test_ubicacion.id}/estanterias", headers=headers,
        json={"codigo": "EST-9", "nombre": "Estantería 9"},
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assert response.json()["message"] == "Estantería creada exitosamente"

async def test_update_ubicacion_null_codigo_rejected(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(f"{UBICACIONES_URL}/{test_ubicacion.id}", headers=headers, json={"codigo": None})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Datos inválidos"
    assert "codigo" in body["details"][0]["message"]

async def test_update_and_delete_armario_in_ubicacion(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    url = f"{UBICACIONES_URL}/{test_ubicacion.id}/armarios/{test_armario.id}"
    response = await client.put(url, headers=headers, json={"nombre": "Armario principal"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["data"]["nombre"] == "Armario principal"

    response = await client.delete(url, headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["message"] == "Armario eliminado exitosamente"

    response = await client.get(f"{UBICACIONES_URL}/{test_ubicacion.id}/armarios", headers=headers)
    assert response.json()["data"] == []

async def test_armario_of_other_ubicacion_not_found(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_armario: Armario
):
    otra = Ubicacion(codigo="LOC-OTRA", nombre="Bodega norte")
    db.add(otra)
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    url = f"{UBICACIONES_URL}/{otra.id}/armarios/{test_armario.id}"
    response = await client.put(url, headers=headers, json={"nombre": "Intruso"})
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Armario no encontrado"

    response = await client.delete(url, headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    # El armario sigue intacto en su ubicación
    response = await client.get(f"{settings.API_V1_STR}/armarios/{test_armario.id}", headers=headers)
    assert response.json()["data"]["nombre"] == "Armario A"

async def test_update_and_delete_estanteria_in_ubicacion(
    client: AsyncClient, auth_token_tecnico: str, test_ubicacion: Ubicacion, test_estanteria: Estanteria
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    url = f"{UBICACIONES_URL}/{test_ubicacion.id}/estanterias/{test_estanteria.id}"
    response = await client.put(url, headers=headers, json={"nombre": "Estantería metálica"})
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["data"]["nombre"] == "Estantería metálica"

    response = await client.put(url, headers=headers, json={"nombre": None})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await client.delete(url, headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["message"] == "Estantería eliminada exitosamente"

async def test_estanteria_of_other_ubicacion_not_found(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_estanteria: Estanteria
):
    otra = Ubicacion(codigo="LOC-OTRA", nombre="Bodega norte")
    db.add(otra)
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(
        f"{UBICACIONES_URL}/{otra.id}/estanterias/{test_estanteria.id}", headers=headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Estantería no encontrada"

import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Armario, Cajon, Division, Estante, Estanteria, Repuesto, RepuestoUbicacion

pytestmark = pytest.mark.asyncio

API = settings.API_V1_STR


# --- Armarios ---

async def test_read_armario_detail(client: AsyncClient, auth_token_tecnico: str, test_armario: Armario, test_cajon: Cajon):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/armarios/{test_armario.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["ubicacion"]["nombre"] == "Taller Central"
    assert data["_count"] == {"cajones": 1, "organizadores": 0, "repuestos": 0}

async def test_update_armario_code_conflict(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_armario: Armario
):
    otro = Armario(codigo="ARM-B", nombre="Armario B", ubicacion_id=test_armario.ubicacion_id)
    db.add(otro)
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(f"{API}/armarios/{otro.id}", headers=headers, json={"codigo": test_armario.codigo})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El código de armario ya existe"

async def test_delete_armario_with_cajones_blocked(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario, test_cajon: Cajon
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/armarios/{test_armario.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"].startswith("No se puede eliminar el armario")

async def test_delete_empty_armario(client: AsyncClient, auth_token_tecnico: str, test_armario: Armario):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/armarios/{test_armario.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json() == {"success": True, "data": None, "message": "Armario eliminado exitosamente"}


# --- Cajones ---

async def test_create_cajones_generates_sequential_codes(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    url = f"{API}/armarios/{test_armario.id}/cajones"
    codigos = []
    for nombre in ("Cajón superior", "Cajón medio"):
        response = await client.post(url, headers=headers, json={"nombre": nombre})
        assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
        codigos.append(response.json()["data"]["codigo"])
    assert codigos == ["CAJ-001", "CAJ-002"]

    response = await client.get(url, headers=headers)
    assert [c["codigo"] for c in response.json()["data"]] == ["CAJ-001", "CAJ-002"]

async def test_cajon_codes_are_scoped_per_container(
    client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon, test_estanteria: Estanteria
):
    """Un cajón de la estantería puede repetir el código de uno del armario."""
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/estanterias/{test_estanteria.id}/cajones", headers=headers, json={"nombre": "Cajón de estantería"}
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["codigo"] == test_cajon.codigo
    assert data["estanteriaId"] == str(test_estanteria.id)
    assert data["armarioId"] is None

async def test_create_cajon_duplicate_code(
    client: AsyncClient, auth_token_tecnico: str, test_armario: Armario, test_cajon: Cajon
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/armarios/{test_armario.id}/cajones", headers=headers,
        json={"codigo": test_cajon.codigo, "nombre": "Copia"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "El código de cajón ya existe en este contenedor"

async def test_create_cajon_unknown_armario(client: AsyncClient, auth_token_tecnico: str):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/armarios/00000000-0000-0000-0000-000000000000/cajones", headers=headers, json={"nombre": "X"}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Armario no encontrado"

async def test_read_cajon_detail(
    client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon, test_division: Division
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/cajones/{test_cajon.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["armario"]["codigo"] == "ARM-A"
    assert data["estanteria"] is None
    assert data["ruta"] == "Taller Central > Armario A > Cajón 1"
    assert [d["codigo"] for d in data["divisiones"]] == [test_division.codigo]

async def test_update_cajon(client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(
        f"{API}/cajones/{test_cajon.id}", headers=headers, json={"nombre": "Cajón tornillería"}
    )
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    assert response.json()["data"]["nombre"] == "Cajón tornillería"
    assert response.json()["data"]["armarioId"] == str(test_cajon.armario_id)

async def test_update_cajon_null_nombre_rejected(client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.put(f"{API}/cajones/{test_cajon.id}", headers=headers, json={"nombre": None})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Datos inválidos"
    assert "nombre" in body["details"][0]["message"]

    response = await client.get(f"{API}/cajones/{test_cajon.id}", headers=headers)
    assert response.json()["data"]["nombre"] == "Cajón 1"

async def test_delete_cajon_with_repuestos_blocked(
    client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon, test_repuesto_en_cajon: Repuesto
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/cajones/{test_cajon.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se puede eliminar el cajón porque contiene divisiones o repuestos asociados"


# --- Divisiones ---

async def test_create_division_generates_code(
    client: AsyncClient, auth_token_tecnico: str, test_cajon: Cajon, test_division: Division
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/cajones/{test_cajon.id}/divisiones", headers=headers, json={"nombre": "División 2"}
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assert response.json()["data"]["codigo"] == "DIV-002"

async def test_division_limit_per_cajon(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_cajon: Cajon
):
    for n in range(1, 21):
        db.add(Division(codigo=f"DIV-{n:03d}", nombre=f"División {n}", cajon_id=test_cajon.id))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/cajones/{test_cajon.id}/divisiones", headers=headers, json={"nombre": "División 21"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se pueden crear más de 20 divisiones por cajón"

async def test_read_division_detail(client: AsyncClient, auth_token_tecnico: str, test_division: Division):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/divisiones/{test_division.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["cajon"]["codigo"] == "CAJ-001"
    assert data["ruta"].endswith("Cajón 1 > División 1")

async def test_delete_division_with_repuesto_blocked(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_division: Division, test_repuesto: Repuesto
):
    db.add(RepuestoUbicacion(repuesto_id=test_repuesto.id, division_id=test_division.id, cantidad=1))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/divisiones/{test_division.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT

async def test_delete_division(client: AsyncClient, auth_token_tecnico: str, test_division: Division):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/divisiones/{test_division.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    response = await client.get(f"{API}/divisiones/{test_division.id}", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "División no encontrada"


# --- Estanterías y estantes ---

async def test_read_estanteria_detail(
    client: AsyncClient, auth_token_tecnico: str, test_estanteria: Estanteria, test_estante: Estante
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/estanterias/{test_estanteria.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert [e["codigo"] for e in data["estantes"]] == [test_estante.codigo]
    assert data["_count"]["estantes"] == 1

async def test_create_estante_generates_code(
    client: AsyncClient, auth_token_tecnico: str, test_estanteria: Estanteria
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.post(
        f"{API}/estanterias/{test_estanteria.id}/estantes", headers=headers, json={"nombre": "Nivel 1"}
    )
    assert response.status_code == status.HTTP_201_CREATED, f"Detalle error: {response.text}"
    assert response.json()["data"]["codigo"] == "EST-001"

async def test_read_estante_detail(client: AsyncClient, auth_token_tecnico: str, test_estante: Estante):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{API}/estantes/{test_estante.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["estanteria"]["codigo"] == "EST-1"
    assert data["ruta"] == "Taller Central > Estantería 1 > Estante superior"

async def test_delete_estanteria_with_estantes_blocked(
    client: AsyncClient, auth_token_tecnico: str, test_estanteria: Estanteria, test_estante: Estante
):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/estanterias/{test_estanteria.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = await client.delete(f"{API}/estantes/{test_estante.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"

    response = await client.delete(f"{API}/estanterias/{test_estanteria.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"

async def test_delete_estante_with_repuestos_blocked(
    client: AsyncClient, auth_token_tecnico: str, db: Session, test_estante: Estante, test_repuesto: Repuesto
):
    db.add(RepuestoUbicacion(repuesto_id=test_repuesto.id, estante_id=test_estante.id, cantidad=2))
    db.commit()

    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.delete(f"{API}/estantes/{test_estante.id}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "No se puede eliminar el estante porque contiene repuestos asociados"

    response = await client.get(f"{API}/estantes/{test_estante.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK

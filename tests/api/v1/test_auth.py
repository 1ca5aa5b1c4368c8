import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import create_access_token
from app.models.usuario import Usuario

from tests.conftest import TEST_TECNICO_PASSWORD

pytestmark = pytest.mark.asyncio

LOGIN_URL = f"{settings.API_V1_STR}/auth/login/access-token"


async def test_login_success(client: AsyncClient, test_tecnico_fixture: Usuario, db: Session):
    login_data = {"username": test_tecnico_fixture.email, "password": TEST_TECNICO_PASSWORD}
    response = await client.post(LOGIN_URL, data=login_data)

    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    token = response.json()
    assert "access_token" in token
    assert token["token_type"] == "bearer"
    assert response.headers["X-RateLimit-Limit"] == str(settings.AUTH_RATE_LIMIT_MAX_REQUESTS)

    db.refresh(test_tecnico_fixture)
    assert test_tecnico_fixture.ultimo_login is not None

async def test_login_wrong_password(client: AsyncClient, test_tecnico_fixture: Usuario):
    login_data = {"username": test_tecnico_fixture.email, "password": "wrongpassword"}
    response = await client.post(LOGIN_URL, data=login_data)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Credenciales inválidas"

async def test_login_user_not_found(client: AsyncClient):
    login_data = {"username": "nadie@masirep.com", "password": "somepassword"}
    response = await client.post(LOGIN_URL, data=login_data)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Credenciales inválidas"

async def test_login_inactive_user(client: AsyncClient, test_tecnico_fixture: Usuario, db: Session):
    test_tecnico_fixture.is_active = False
    db.add(test_tecnico_fixture)
    db.commit()

    login_data = {"username": test_tecnico_fixture.email, "password": TEST_TECNICO_PASSWORD}
    response = await client.post(LOGIN_URL, data=login_data)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

async def test_login_rate_limit(client: AsyncClient, test_tecnico_fixture: Usuario):
    """El sexto intento dentro de la ventana se rechaza, aunque las credenciales sean correctas."""
    bad_login = {"username": test_tecnico_fixture.email, "password": "wrongpassword"}
    for _ in range(settings.AUTH_RATE_LIMIT_MAX_REQUESTS):
        response = await client.post(LOGIN_URL, data=bad_login)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    good_login = {"username": test_tecnico_fixture.email, "password": TEST_TECNICO_PASSWORD}
    response = await client.post(LOGIN_URL, data=good_login)
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert "Retry-After" in response.headers
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.json()["error"] == "Demasiados intentos de autenticación, intente más tarde"

async def test_read_session(client: AsyncClient, auth_token_tecnico: str, test_tecnico_fixture: Usuario):
    headers = {"Authorization": f"Bearer {auth_token_tecnico}"}
    response = await client.get(f"{settings.API_V1_STR}/auth/session", headers=headers)
    assert response.status_code == status.HTTP_200_OK, f"Detalle error: {response.text}"
    data = response.json()["data"]
    assert data["user"]["email"] == test_tecnico_fixture.email
    assert data["user"]["rol"] == "tecnico"
    assert data["expires"] is not None

async def test_protected_route_without_token(client: AsyncClient):
    response = await client.get(f"{settings.API_V1_STR}/repuestos")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "error": "No autorizado"}

async def test_protected_route_invalid_token(client: AsyncClient):
    headers = {"Authorization": "Bearer token.invalido.xyz"}
    response = await client.get(f"{settings.API_V1_STR}/ubicaciones", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

async def test_token_of_deactivated_user_is_rejected(
    client: AsyncClient, test_tecnico_fixture: Usuario, db: Session
):
    token = create_access_token(subject=test_tecnico_fixture.id)
    test_tecnico_fixture.is_active = False
    db.add(test_tecnico_fixture)
    db.commit()

    headers = {"Authorization": f"Bearer {token}"}
    response = await client.get(f"{settings.API_V1_STR}/auth/session", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

async def test_health_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"

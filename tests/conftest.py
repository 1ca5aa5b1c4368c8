import os

# Base de datos en memoria para los tests (antes de importar la app)
os.environ.setdefault("DATABASE_URI", "sqlite://")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Generator, Any
import json
import logging

import httpx
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.models import ( # noqa
    Usuario, Ubicacion, Armario, Estanteria, Estante, Cajon, Division,
    Organizador, Cajoncito, Repuesto, RepuestoUbicacion, Componente,
    ComponenteUbicacion, Equipo, RepuestoEquipo,
)

from app.main import app as fastapi_app

from app.core.config import settings
from app.core.rate_limit import auth_rate_limit
from app.api.deps import get_db # Usado para override
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys

from app.core.password import get_password_hash

# Configuración básica de logging para los tests
logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] [%(name)s] [%(funcName)s] %(message)s')
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)


# pysqlite no emite BEGIN por sí mismo; sin esto los SAVEPOINT no funcionan
@event.listens_for(engine, "connect")
def _do_connect(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _do_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """
    Fixture que proporciona la instancia de la aplicación FastAPI para los tests.
    """
    return fastapi_app

@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    logger.info("== Creando esquema de BD para la sesión de tests ==")
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    logger.info("== Esquema de BD eliminado ==")

@pytest.fixture(autouse=True)
def reset_rate_limit():
    """Cada test empieza con el contador de intentos de login vacío."""
    auth_rate_limit.reset()
    yield
    auth_rate_limit.reset()

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Sesión de BD por test. Los commit de las rutas liberan un SAVEPOINT;
    la transacción externa se revierte al terminar.
    """
    connection = engine.connect()
    transaction = connection.begin()
    db_session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")
    session_identifier = id(db_session)
    logger.debug(f"DB Session {session_identifier} iniciada para test.")
    try:
        yield db_session
    finally:
        db_session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()
        logger.debug(f"DB Session {session_identifier}: Cerrada y rollback completado.")

@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI, db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Fixture para obtener un cliente HTTP asíncrono para interactuar con la app."""
    def override_get_db_for_test():
        yield db

    app.dependency_overrides[get_db] = override_get_db_for_test
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


async def get_auth_token(client: AsyncClient, email: str, password: str) -> str | None:
    """Función helper para obtener un token de autenticación."""
    login_data = {"username": email, "password": password}
    url = f"{settings.API_V1_STR}/auth/login/access-token"
    try:
        response = await client.post(url, data=login_data)
        response.raise_for_status()
        return response.json().get("access_token")
    except httpx.HTTPStatusError as e:
        try:
            error_detail = e.response.json()
        except json.JSONDecodeError:
            error_detail = e.response.text
        logger.error(f"FALLO al obtener token para '{email}': Status={e.response.status_code}. Detail: {error_detail}")
        return None


def persist(db: Session, obj: Any) -> Any:
    """
    Guarda `obj` liberando el SAVEPOINT actual, de modo que un rollback
    posterior de una ruta no lo descarte. La transacción externa del test
    se sigue revirtiendo al terminar.
    """
    db.add(obj)
    db.commit()
    db.expire_all()
    return obj


# Contraseñas de prueba
TEST_ADMIN_PASSWORD = "AdminPass123!"
TEST_SUPERVISOR_PASSWORD = "SuperPass123!"
TEST_TECNICO_PASSWORD = "TecnicoPass123!"


def _ensure_user(db: Session, email: str, password: str, rol: str, nombre: str) -> Usuario:
    user = Usuario(
        nombre=nombre,
        email=email,
        rol=rol,
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    return persist(db, user)


@pytest.fixture(scope="function")
def test_admin_fixture(db: Session) -> Usuario:
    return _ensure_user(db, "admin@masirep.com", TEST_ADMIN_PASSWORD, "admin", "Administrador")

@pytest.fixture(scope="function")
def test_supervisor_fixture(db: Session) -> Usuario:
    return _ensure_user(db, "supervisor@masirep.com", TEST_SUPERVISOR_PASSWORD, "supervisor", "Supervisor")

@pytest.fixture(scope="function")
def test_tecnico_fixture(db: Session) -> Usuario:
    return _ensure_user(db, "tecnico@masirep.com", TEST_TECNICO_PASSWORD, "tecnico", "Técnico")

@pytest_asyncio.fixture(scope="function")
async def auth_token_admin(client: AsyncClient, test_admin_fixture: Usuario) -> str:
    token = await get_auth_token(client, test_admin_fixture.email, TEST_ADMIN_PASSWORD)
    if not token:
        pytest.fail("No se pudo obtener token para el administrador.")
    return token

@pytest_asyncio.fixture(scope="function")
async def auth_token_supervisor(client: AsyncClient, test_supervisor_fixture: Usuario) -> str:
    token = await get_auth_token(client, test_supervisor_fixture.email, TEST_SUPERVISOR_PASSWORD)
    if not token:
        pytest.fail("No se pudo obtener token para el supervisor.")
    return token

@pytest_asyncio.fixture(scope="function")
async def auth_token_tecnico(client: AsyncClient, test_tecnico_fixture: Usuario) -> str:
    token = await get_auth_token(client, test_tecnico_fixture.email, TEST_TECNICO_PASSWORD)
    if not token:
        pytest.fail("No se pudo obtener token para el técnico.")
    return token


# --- Jerarquía de almacenamiento ---

@pytest.fixture(scope="function")
def test_ubicacion(db: Session) -> Ubicacion:
    return persist(db, Ubicacion(codigo="LOC-TALLER", nombre="Taller Central", descripcion="Bodega principal"))

@pytest.fixture(scope="function")
def test_armario(db: Session, test_ubicacion: Ubicacion) -> Armario:
    return persist(db, Armario(codigo="ARM-A", nombre="Armario A", ubicacion_id=test_ubicacion.id))

@pytest.fixture(scope="function")
def test_estanteria(db: Session, test_ubicacion: Ubicacion) -> Estanteria:
    return persist(db, Estanteria(codigo="EST-1", nombre="Estantería 1", ubicacion_id=test_ubicacion.id))

@pytest.fixture(scope="function")
def test_estante(db: Session, test_estanteria: Estanteria) -> Estante:
    return persist(db, Estante(codigo="EST-001", nombre="Estante superior", estanteria_id=test_estanteria.id))

@pytest.fixture(scope="function")
def test_cajon(db: Session, test_armario: Armario) -> Cajon:
    return persist(db, Cajon(codigo="CAJ-001", nombre="Cajón 1", armario_id=test_armario.id))

@pytest.fixture(scope="function")
def test_division(db: Session, test_cajon: Cajon) -> Division:
    return persist(db, Division(codigo="DIV-001", nombre="División 1", cajon_id=test_cajon.id))

@pytest.fixture(scope="function")
def test_organizador(db: Session, test_armario: Armario) -> Organizador:
    return persist(db, Organizador(codigo="ORG-001", nombre="Organizador 1", armario_id=test_armario.id))

@pytest.fixture(scope="function")
def test_cajoncito(db: Session, test_organizador: Organizador) -> Cajoncito:
    return persist(db, Cajoncito(codigo="CAJ-001", nombre="Cajoncito 1", organizador_id=test_organizador.id))


# --- Ítems ---

@pytest.fixture(scope="function")
def test_repuesto(db: Session) -> Repuesto:
    return persist(db, Repuesto(
        codigo="REP-0001", nombre="Rodamiento 6204", marca="SKF", categoria="Rodamientos", stock_minimo=5,
    ))

@pytest.fixture(scope="function")
def test_repuesto_en_cajon(db: Session, test_repuesto: Repuesto, test_cajon: Cajon) -> Repuesto:
    """Repuesto con 3 unidades guardadas en `test_cajon`."""
    persist(db, RepuestoUbicacion(repuesto_id=test_repuesto.id, cajon_id=test_cajon.id, cantidad=3))
    repuesto = db.get(Repuesto, test_repuesto.id)
    repuesto.stock_actual = 3
    return persist(db, repuesto)

@pytest.fixture(scope="function")
def test_componente(db: Session) -> Componente:
    return persist(db, Componente(
        categoria="RESISTENCIA",
        descripcion="Resistencia de carbón 10k",
        valor_unidad=[{"valor": "10", "unidad": "kΩ"}, {"valor": "1", "unidad": "W"}],
        stock_minimo=10,
    ))

@pytest.fixture(scope="function")
def test_equipo(db: Session) -> Equipo:
    return persist(db, Equipo(codigo="EQ-001", sap="SAP-1001", nombre="Compresor Atlas", marca="Atlas Copco"))

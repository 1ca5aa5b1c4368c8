from fastapi import APIRouter

# Importar los routers individuales de cada módulo
from . import auth, usuarios, ubicaciones, armarios, estanterias, estantes
from . import cajones, divisiones, organizadores, cajoncitos
from . import repuestos, componentes, equipos, stock

# Crear el router principal de la API
api_router = APIRouter()

# Incluir cada router individual con su prefijo y etiquetas
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(usuarios.router, prefix="/usuarios", tags=["Usuarios"])

# Jerarquía de almacenamiento
api_router.include_router(ubicaciones.router, prefix="/ubicaciones", tags=["Ubicaciones"])
api_router.include_router(armarios.router, prefix="/armarios", tags=["Armarios"])
api_router.include_router(estanterias.router, prefix="/estanterias", tags=["Estanterías"])
api_router.include_router(estantes.router, prefix="/estantes", tags=["Estantes"])
api_router.include_router(cajones.router, prefix="/cajones", tags=["Cajones"])
api_router.include_router(divisiones.router, prefix="/divisiones", tags=["Divisiones"])
api_router.include_router(organizadores.router, prefix="/organizadores", tags=["Organizadores"])
api_router.include_router(cajoncitos.router, prefix="/cajoncitos", tags=["Cajoncitos"])

# Ítems
api_router.include_router(repuestos.router, prefix="/repuestos", tags=["Repuestos"])
api_router.include_router(componentes.router, prefix="/componentes", tags=["Componentes"])
api_router.include_router(equipos.router, prefix="/equipos", tags=["Equipos"])
api_router.include_router(stock.router, prefix="/stock", tags=["Stock"])

from .common import ApiResponse, Conteo, PaginatedResponse, Pagination, UpdateModel

# Token & Auth
from .token import Sesion, SesionUsuario, Token, TokenPayload

# Usuario
from .usuario import UsuarioCreate, UsuarioRead, UsuarioUpdate

# Jerarquía de almacenamiento
from .referencias import EquipoSimple, NodoArbol, NodoSimple, NodoUbicacion, RepuestoSimple
from .ubicacion import UbicacionCreate, UbicacionDetalle, UbicacionRead, UbicacionUpdate
from .armario import ArmarioCreate, ArmarioDetalle, ArmarioRead, ArmarioUpdate
from .estanteria import EstanteriaCreate, EstanteriaDetalle, EstanteriaRead, EstanteriaUpdate
from .estante import EstanteCreate, EstanteDetalle, EstanteRead, EstanteUpdate
from .cajon import CajonCreate, CajonDetalle, CajonRead, CajonUpdate
from .division import DivisionCreate, DivisionDetalle, DivisionRead, DivisionUpdate
from .organizador import OrganizadorCreate, OrganizadorDetalle, OrganizadorRead, OrganizadorUpdate
from .cajoncito import CajoncitoCreate, CajoncitoDetalle, CajoncitoRead, CajoncitoUpdate

# Ítems
from .repuesto import (
    CodigoDisponibilidad,
    RepuestoCreate,
    RepuestoDetalle,
    RepuestoEquipoRead,
    RepuestoEquiposIn,
    RepuestoRead,
    RepuestoUbicacionCreate,
    RepuestoUbicacionRead,
    RepuestoUbicacionUpdate,
    RepuestoUpdate,
    UbicacionCantidad,
)
from .componente import (
    ComponenteCreate,
    ComponenteDetalle,
    ComponenteRead,
    ComponenteUbicacionCreate,
    ComponenteUbicacionRead,
    ComponenteUbicacionUpdate,
    ComponenteUpdate,
    ValorUnidad,
)
from .equipo import EquipoCreate, EquipoDetalle, EquipoRead, EquipoRepuestoCreate, EquipoRepuestoRead, EquipoUpdate

# Stock y contenido
from .stock import ListadoStock, ResumenStock, StockItem, StockRecalculo, StockUbicacion
from .contenido import ContenidoUbicacion, ItemContenido, ResumenContenido

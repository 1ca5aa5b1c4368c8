from enum import Enum

class RolUsuarioEnum(str, Enum):
    """Valores que coinciden con el CHECK constraint de la tabla `usuarios`."""
    TECNICO = 'tecnico'
    SUPERVISOR = 'supervisor'
    ADMIN = 'admin'

class CategoriaComponenteEnum(str, Enum):
    """Valores que coinciden con el CHECK constraint de la tabla `componentes`."""
    RESISTENCIA = 'RESISTENCIA'
    CAPACITOR = 'CAPACITOR'
    INTEGRADO = 'INTEGRADO'
    VENTILADOR = 'VENTILADOR'
    OTROS = 'OTROS'

class TipoUbicacionEnum(str, Enum):
    """Niveles de la jerarquía de almacenamiento."""
    UBICACION = 'ubicacion'
    ARMARIO = 'armario'
    ESTANTERIA = 'estanteria'
    ESTANTE = 'estante'
    CAJON = 'cajon'
    DIVISION = 'division'
    ORGANIZADOR = 'organizador'
    CAJONCITO = 'cajoncito'

class TipoUbicacionRepuestoEnum(str, Enum):
    """Niveles en los que se puede guardar un repuesto (columnas de `repuesto_ubicaciones`)."""
    ARMARIO = 'armario'
    ESTANTERIA = 'estanteria'
    ESTANTE = 'estante'
    CAJON = 'cajon'
    DIVISION = 'division'
    CAJONCITO = 'cajoncito'

class TipoItemEnum(str, Enum):
    REPUESTO = 'repuesto'
    COMPONENTE = 'componente'

class FiltroItemsEnum(str, Enum):
    """Filtro de tipo de ítem para el contenido de una ubicación y el stock."""
    REPUESTOS = 'repuestos'
    COMPONENTES = 'componentes'
    ALL = 'all'

class SortOrderEnum(str, Enum):
    ASC = 'asc'
    DESC = 'desc'

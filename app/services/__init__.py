"""
Módulo de Servicios

Este paquete contiene la lógica de negocio y las interacciones
con la base de datos para las diferentes entidades de la aplicación.

Cada módulo define un servicio (usualmente una instancia de una clase)
que encapsula las operaciones CRUD y específicas para un modelo ORM.
"""

# Importar instancias de servicio para facilitar el acceso
from .usuario import usuario_service
from .ubicacion import ubicacion_service
from .armario import armario_service
from .estanteria import estanteria_service
from .estante import estante_service
from .cajon import cajon_service
from .division import division_service
from .organizador import organizador_service
from .cajoncito import cajoncito_service
from .equipo import equipo_service
from .repuesto import repuesto_service
from .componente import componente_service
from .stock import stock_service
from .contenido import contenido_service

__all__ = [
    "usuario_service",
    "ubicacion_service",
    "armario_service",
    "estanteria_service",
    "estante_service",
    "cajon_service",
    "division_service",
    "organizador_service",
    "cajoncito_service",
    "equipo_service",
    "repuesto_service",
    "componente_service",
    "stock_service",
    "contenido_service",
]

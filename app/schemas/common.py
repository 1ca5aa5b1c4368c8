import math
from typing import ClassVar, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base de los schemas de la API: atributos en snake_case en Python,
    camelCase en el JSON. Acepta ambos formatos en la entrada.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UpdateModel(CamelModel):
    """
    Base de los schemas de actualización parcial. Los campos de
    `campos_no_nulos` pueden omitirse, pero no enviarse como `null`.
    """
    campos_no_nulos: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_campos_no_nulos(self) -> "UpdateModel":
        nulos = [
            to_camel(campo) for campo in self.campos_no_nulos
            if campo in self.model_fields_set and getattr(self, campo) is None
        ]
        if nulos:
            raise ValueError(f"Los campos no pueden ser nulos: {', '.join(nulos)}")
        return self


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Sobre estándar de respuesta: `{success, data, message}`."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Sobre de respuesta para listados paginados."""
    success: bool = True
    data: List[T]
    pagination: Pagination


class Conteo(BaseModel):
    count: int

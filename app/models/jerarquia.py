from typing import Any, Optional


class NodoJerarquia:
    """
    Comportamiento común de los niveles de la jerarquía de almacenamiento
    (ubicación, armario, estantería, estante, cajón, división, organizador, cajoncito).
    """
    tipo_ubicacion = ""

    @property
    def padre(self) -> Optional[Any]:
        return None

    @property
    def ruta(self) -> str:
        """Ruta legible desde la ubicación raíz, p.ej. 'Taller > Armario A > Cajón 1'."""
        padre = self.padre
        if padre is None:
            return self.nombre  # type: ignore[attr-defined]
        return f"{padre.ruta} > {self.nombre}"  # type: ignore[attr-defined]

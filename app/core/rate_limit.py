import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import HTTPException, Request, Response, status

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _Ventana:
    count: int
    reset_time: float


class RateLimiter:
    """
    Limitador de peticiones en memoria por ventana fija, indexado por IP del cliente.

    Se usa como dependencia de FastAPI. Al superar el límite lanza 429 con las
    cabeceras `Retry-After` y `X-RateLimit-*`; en caso contrario añade las
    cabeceras `X-RateLimit-*` a la respuesta.
    """

    def __init__(self, max_requests: int, window_seconds: int, message: str):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._entries: Dict[str, _Ventana] = {}
        self._lock = threading.Lock()

    @staticmethod
    def client_identifier(request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
        return request.client.host if request.client else "unknown"

    def hit(self, identifier: str, now: Optional[float] = None) -> _Ventana:
        """Registra un intento y devuelve la ventana resultante. Lanza 429 si se excede el límite."""
        now = time.time() if now is None else now
        with self._lock:
            # Limpieza de ventanas vencidas
            for key in [k for k, v in self._entries.items() if v.reset_time < now]:
                del self._entries[key]

            entry = self._entries.get(identifier)
            if entry is None:
                entry = _Ventana(count=0, reset_time=now + self.window_seconds)
                self._entries[identifier] = entry

            if entry.count >= self.max_requests:
                retry_after = max(1, int(entry.reset_time - now + 0.999))
                logger.warning(f"Límite de peticiones excedido para '{identifier}'. Reintentar en {retry_after}s.")
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=self.message,
                    headers={**self._headers(entry, remaining=0), "Retry-After": str(retry_after)},
                )

            entry.count += 1
            return _Ventana(count=entry.count, reset_time=entry.reset_time)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def _headers(self, entry: _Ventana, remaining: int) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(0, remaining)),
            "X-RateLimit-Reset": datetime.fromtimestamp(entry.reset_time, tz=timezone.utc).isoformat(),
        }

    def __call__(self, request: Request, response: Response) -> None:
        entry = self.hit(self.client_identifier(request))
        for key, value in self._headers(entry, self.max_requests - entry.count).items():
            response.headers[key] = value


auth_rate_limit = RateLimiter(
    max_requests=settings.AUTH_RATE_LIMIT_MAX_REQUESTS,
    window_seconds=settings.AUTH_RATE_LIMIT_WINDOW_SECONDS,
    message="Demasiados intentos de autenticación, intente más tarde",
)

"""
Middleware que protege el panel de administración.

Cualquier petición bajo el prefijo protegido sin sesión válida se redirige
a la página de login del mismo origen antes de que se ejecute ningún handler.
"""
import logging
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

from ..security import resolve_session

logger = logging.getLogger(__name__)

SessionResolver = Callable[[Request], bool]


class AdminGateMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        resolver: SessionResolver = resolve_session,
        prefix: str = "/admin",
        login_path: str = "/login",
    ):
        super().__init__(app)
        self.resolver = resolver
        self.prefix = prefix.rstrip("/")
        self.login_path = login_path

    def is_protected(self, path: str) -> bool:
        return path.startswith(self.prefix)

    def has_session(self, request: Request) -> bool:
        try:
            return bool(self.resolver(request))
        except Exception:
            # Si no se puede resolver la sesión, se trata como no autenticado
            logger.warning("No se pudo resolver la sesión para %s", request.url.path, exc_info=True)
            return False

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        if self.is_protected(request.url.path) and not self.has_session(request):
            login_url = request.url.replace(path=self.login_path, query="", fragment="")
            return RedirectResponse(str(login_url), status_code=302)
        return await call_next(request)


__all__ = ["AdminGateMiddleware"]

from fastapi import FastAPI
from .config import get_settings
from .routers import admin, auth, pets
from .middleware.admin_gate import AdminGateMiddleware
from starlette.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import logging

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()

# Configurar rate limiting
limiter = Limiter(key_func=get_remote_address)

app = FastAPI(title=settings.app_name)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.mount("/media", StaticFiles(directory=settings.media_dir), name="media")

# Puerta del panel: corre antes que cualquier handler bajo /admin
app.add_middleware(
    AdminGateMiddleware,
    prefix=settings.admin_prefix,
    login_path=settings.login_path,
)

@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.env}

# Routers
app.include_router(auth.router, tags=["auth"])
app.include_router(pets.router, prefix="/api/pet", tags=["pets"])
app.include_router(admin.router, prefix=settings.admin_prefix, tags=["admin"])

# Endpoint de desarrollo (solo en dev)
if settings.env == "dev":
    from .routers import dev
    app.include_router(dev.router, prefix="/dev", tags=["dev"])

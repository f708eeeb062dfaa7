from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, EmailStr, Field
from motor.motor_asyncio import AsyncIOMotorDatabase
from ..db import get_db
from ..config import get_settings
from ..security import verify_password, create_access_token
from ..middleware.rate_limit import apply_rate_limit
import logging

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

class Login(BaseModel):
    email: EmailStr = Field(..., description="Email del operador")
    password: str = Field(..., min_length=1, description="Contraseña")

@router.get("/login")
async def login_page():
    # Destino de la redirección del panel cuando no hay sesión
    return {"detail": "Inicia sesión para acceder al panel", "login": "POST /login"}

@router.post("/login")
async def login(
    request: Request,
    response: Response,
    payload: Login,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    # Rate limiting: máximo 10 intentos de login por minuto por IP
    apply_rate_limit(request, "10/minute")

    user = await db.users.find_one({"email": payload.email})
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        logger.info("Login fallido para %s", payload.email)
        raise HTTPException(401, "Credenciales inválidas")
    token = create_access_token(str(user["_id"]))
    response.set_cookie(
        settings.session_cookie,
        token,
        max_age=settings.jwt_expires_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.env != "dev",
    )
    return {"access_token": token, "token_type": "bearer"}

@router.post("/logout", status_code=204)
async def logout(response: Response):
    response.delete_cookie(settings.session_cookie)
    return None

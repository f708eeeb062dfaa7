from datetime import datetime, timedelta
from typing import Optional
from fastapi import Request
from jose import jwt
from passlib.context import CryptContext

from .config import get_settings

settings = get_settings()
ALGO = "HS256"
pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd.verify(plain, hashed)


def create_access_token(user_id: str, expires_hours: Optional[int] = None) -> str:
    expire = datetime.utcnow() + timedelta(hours=expires_hours or settings.jwt_expires_hours)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGO)


def _token_from_request(request: Request) -> Optional[str]:
    """Cookie de sesión primero; si no hay, cabecera Authorization: Bearer."""
    token = request.cookies.get(settings.session_cookie)
    if token:
        return token
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return None


def resolve_session(request: Request) -> bool:
    """
    Indica si la petición trae una sesión válida.
    Sin token devuelve False; un token corrupto o caducado lanza JWTError
    y es el llamador quien decide (la puerta del panel falla cerrada).
    """
    token = _token_from_request(request)
    if not token:
        return False
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGO])
    return bool(payload.get("sub"))

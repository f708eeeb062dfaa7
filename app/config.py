from pydantic import BaseModel
import os
from pathlib import Path
from dotenv import load_dotenv
load_dotenv()  # carga el archivo .env de la raíz

class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "PetAdmin")
    env: str = os.getenv("APP_ENV", "dev")
    mongodb_uri: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name: str = os.getenv("DB_NAME", "petadmin")
    jwt_secret: str = os.getenv("JWT_SECRET", "change-me")
    jwt_expires_hours: int = int(os.getenv("JWT_EXPIRES_HOURS", "8"))
    media_dir: str = os.getenv("MEDIA_DIR", str(Path(__file__).resolve().parents[1] / "media"))

    # Servicios HTTP que consume el formulario de edición
    pet_api_base_url: str = os.getenv("PET_API_BASE_URL", "http://localhost:8000")
    breeds_api_url: str = os.getenv("BREEDS_API_URL", "https://dog.ceo/api")
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Puerta de autenticación del panel
    admin_prefix: str = os.getenv("ADMIN_PREFIX", "/admin")
    login_path: str = os.getenv("LOGIN_PATH", "/login")
    session_cookie: str = os.getenv("SESSION_COOKIE", "access_token")

    @property
    def http_timeout(self) -> float | None:
        # 0 desactiva el timeout
        return self.http_timeout_seconds or None


_settings: Settings | None = None
def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
        Path(_settings.media_dir).mkdir(parents=True, exist_ok=True)
        Path(_settings.media_dir, "pets").mkdir(parents=True, exist_ok=True)
    return _settings

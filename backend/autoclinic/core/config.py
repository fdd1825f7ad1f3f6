from pydantic_settings import BaseSettings
from pathlib import Path

INSECURE_DEFAULT_SECRET = "dev_secret_key"


class Settings(BaseSettings):
    APP_NAME: str = "JW Auto Clinic"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Database: overridden by DATABASE_URL env var in deployment (PostgreSQL)
    DATABASE_URL: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent / 'data' / 'autoclinic.db'}"

    # Auth
    SECRET_KEY: str = INSECURE_DEFAULT_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60  # 7 days
    BCRYPT_ROUNDS: int = 10

    # Expired reset tokens are swept on this interval
    RESET_TOKEN_PURGE_INTERVAL_SECONDS: int = 600

    # Reset links
    APP_BASE_URL: str = "https://jw-auto-clinic-246.onrender.com"
    CLIENT_SCHEME: str = "jwautoclinic246"
    APP_RESET_LINK_BASE: str = ""

    # CORS
    FRONTEND_URL: str = "http://localhost:8081"

    # SMTP
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = ""
    SUPPORT_INBOX: str = ""

    class Config:
        env_file = ".env"

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == INSECURE_DEFAULT_SECRET


settings = Settings()

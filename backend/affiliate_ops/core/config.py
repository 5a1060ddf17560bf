from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Affiliate Ops"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./affiliate_ops.db"

    # Sales upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Reporting
    CURRENCY_CODE: str = "IDR"

    # Frontend (added to CORS origins)
    FRONTEND_URL: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

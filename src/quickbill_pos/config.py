from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./quickbill.db"
    DB_ECHO: bool = False

    JWT_SECRET: str = "secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin"

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    # используется, когда у пользователя нет профиля с налоговой ставкой
    DEFAULT_TAX_RATE: Decimal = Decimal("0.05")

    class Config:
        env_file = ".env"

settings = Settings()

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    PROJECT_NAME: str = "Shaker"
    DATABASE_URL: str = "sqlite:///shaker.db"
    DB_TIMEOUT: float = 30.0
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    IMPORT_PATH: Optional[str] = None

    class Config:
        env_file = ".env"
        env_prefix = "SHAKER_"
        extra = "ignore"


settings = Settings()

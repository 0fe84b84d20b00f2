from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    db_echo: bool = Field(False, alias="DB_ECHO")
    db_pool_recycle: int = Field(300, alias="DB_POOL_RECYCLE")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Process-local cache: default per-key TTL and background sweep interval, in seconds
    cache_default_ttl: int = Field(300, alias="CACHE_DEFAULT_TTL")
    cache_check_period: int = Field(120, alias="CACHE_CHECK_PERIOD")
    cache_max_size: int = Field(10000, alias="CACHE_MAX_SIZE")

    log_level: str = Field("info", alias="LOG_LEVEL")
    log_format: str = Field("console", alias="LOG_FORMAT")  # json | console

    cors_origins: List[str] = Field(["*"], alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

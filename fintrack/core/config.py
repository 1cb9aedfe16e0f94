from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from urllib.parse import quote_plus
from enum import Enum

class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "fintrack"
    VERSION: str = "0.1.0"
    API_V1_STR: str = ""

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Security
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # JWT Settings
    ALGORITHM: str = "HS256"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    # Server clock: every due date and timestamp is read in this fixed offset
    SERVER_UTC_OFFSET_HOURS: int = 7

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # WebSocket: pub/sub channel carrying push events from workers to web processes
    WS_MESSAGE_QUEUE: str = "fintrack:push"
    PUSH_RELAY_ENABLED: bool = True

    # Observability
    METRICS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "server.log"

    @field_validator("SERVER_UTC_OFFSET_HOURS")
    @classmethod
    def check_utc_offset(cls, v: int) -> int:
        if not -12 <= v <= 14:
            raise ValueError("SERVER_UTC_OFFSET_HOURS must be between -12 and 14")
        return v

    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            if self.POSTGRES_USER and self.POSTGRES_SERVER and self.POSTGRES_DB:
                safe_user = quote_plus(self.POSTGRES_USER)
                host = f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
                if self.POSTGRES_PASSWORD:
                    safe_password = quote_plus(self.POSTGRES_PASSWORD)
                    self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}:{safe_password}@{host}"
                else:
                    self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}@{host}"
            else:
                self.SQLALCHEMY_DATABASE_URI = "sqlite:///./fintrack.db"
        return self

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
    )


settings = Settings()

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: str = "dev"

    # Prefix of the alert headers (X-<APP_NAME>-alert, ...)
    APP_NAME: str = "catalogApp"

    # Database settings
    DB_USER: str
    DB_PASSWORD: SecretStr
    DB_HOST: str = "catalog-db"
    DB_PORT: int = 5432
    DB_NAME: str = "catalog-db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    DB_INIT_RETRY_INTERVAL: int = 2
    DB_INIT_MAX_RETRIES: int = 5

    # Redis settings
    REDIS_IP: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: int = 5
    REDIS_CONNECT_TIMEOUT: int = 5
    REDIS_HEALTH_CHECK_INTERVAL: int = 30
    REDIS_RETRY_ON_TIMEOUT: bool = True

    # Search index settings
    SEARCH_REDIS_DB: int = 2
    SEARCH_KEY_PREFIX: str = "search"
    SEARCH_INDEX_WORKER_ENABLED: bool = True
    SEARCH_INDEX_WORKER_INTERVAL: float = 5.0
    SEARCH_INDEX_BATCH_SIZE: int = 100
    SEARCH_INDEX_MAX_ATTEMPTS: int = 10

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOKI_ENABLED: bool = False
    LOKI_URL: str = "http://loki:3100"
    LOKI_VERSION: str = "1"

    @property
    def DATABASE_URL(self) -> str:
        password = self.DB_PASSWORD.get_secret_value()
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


app_settings = Settings()

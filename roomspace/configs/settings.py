from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    APP_NAME: str = "Roomspace"
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="APP_")


class CORSSettings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://127.0.0.1:5173", "http://localhost:5173"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]
    CORS_EXPOSE_HEADERS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CORS_")


class MongoSettings(BaseSettings):
    MONGO_HOST: str = ""
    MONGO_PORT: int = 27017
    MONGO_DB: str = "roomspace"
    MONGO_USER: str = ""
    MONGO_PWD: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MONGO_")

    @property
    def MONGO_URL(self) -> str:
        host = self.MONGO_HOST or "localhost"
        port = self.MONGO_PORT or 27017
        if self.MONGO_USER and self.MONGO_PWD:
            return f"mongodb://{self.MONGO_USER}:{self.MONGO_PWD}@{host}:{port}"
        return f"mongodb://{host}:{port}"


class RedisSettings(BaseSettings):
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PWD: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="REDIS_")

    @property
    def redis_password(self) -> str:
        return self.REDIS_PWD


class CelerySettings(BaseSettings):
    CELERY_BROKER_URL: str = ""
    CELERY_RESULT_BACKEND: str = ""
    CELERY_TASK_SERIALIZER: str = "json"
    CELERY_ACCEPT_CONTENT: list[str] = ["json"]
    CELERY_RESULT_SERIALIZER: str = "json"
    CELERY_TIMEZONE: str = "UTC"
    CELERY_ENABLE_UTC: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CELERY_")

    @property
    def get_broker_url(self) -> str:
        if self.CELERY_BROKER_URL:
            return self.CELERY_BROKER_URL
        from roomspace.configs.settings import settings
        pwd = settings.redis_password
        if pwd:
            return f"redis://:{pwd}@{settings.REDIS_HOST}:{settings.REDIS_PORT}/0"
        return f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0"

    @property
    def get_result_backend(self) -> str:
        if self.CELERY_RESULT_BACKEND:
            return self.CELERY_RESULT_BACKEND
        from roomspace.configs.settings import settings
        pwd = settings.redis_password
        if pwd:
            return f"redis://:{pwd}@{settings.REDIS_HOST}:{settings.REDIS_PORT}/1"
        return f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/1"


class SentrySettings(BaseSettings):
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0
    SENTRY_SEND_DEFAULT_PII: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SENTRY_")


class ContentSettings(BaseSettings):
    FOLDER_NAME_MAX_LENGTH: int = 50
    # Upper bound for parent-pointer walks; deeper chains are treated as corruption
    FOLDER_MAX_DEPTH: int = 64
    CONTENT_PAGE_SIZE_DEFAULT: int = 20
    CONTENT_PAGE_SIZE_MAX: int = 100
    RECENT_ITEMS_LIMIT: int = 5
    FILE_PROCESSING_ENABLED: bool = True

    model_config = SettingsConfigDict(env_file=".env")


class Settings(AppSettings, CORSSettings, MongoSettings, RedisSettings, CelerySettings, SentrySettings, ContentSettings):
    RELEASE: str | None = None
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()

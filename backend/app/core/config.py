"""Application Configuration

pydantic-settings 기반 환경 설정
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === App ===
    APP_NAME: str = "REST Book Kernel"
    APP_VERSION: str = "0.4.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # === Server ===
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # === Transport ===
    REQUEST_TIMEOUT_SEC: Optional[float] = 30.0
    FOLLOW_REDIRECTS: bool = True
    MAX_REDIRECTS: int = 20
    # axios 처럼 2xx 외 응답을 실패로 취급 (응답 본문은 유지)
    TREAT_HTTP_ERRORS_AS_FAILURE: bool = True

    # === Response Cache ===
    CACHE_MAX_ENTRIES: int = 500

    # === Side Channel ===
    RESPONSE_SAVE_DIR: str = "./responses"

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json, text

    # === CORS ===
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton
settings = Settings()

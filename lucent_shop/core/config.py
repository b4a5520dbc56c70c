from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Database
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_NAME: str = "lucent"
    # Full URL override (tests use sqlite://)
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # JWT issued by the auth provider
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 7 days

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    ORDER_STATS_CACHE_SECONDS: int = 60

    ADMIN_EMAILS_STR: str = Field(default="", alias="ADMIN_EMAILS")

    @property
    def ADMIN_EMAILS(self) -> List[str]:
        return [email.strip().lower() for email in self.ADMIN_EMAILS_STR.split(',') if email.strip()]

    # Orders
    SHIPPING_FEE: int = 3500 # KRW, charged once per order with shippable goods
    ORDER_NUMBER_MAX_ATTEMPTS: int = 5

    # Digital delivery
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    DOWNLOAD_LINK_EXPIRE_SECONDS: int = 3600
    # Download links are signed apart from access tokens; derived from SECRET_KEY when unset
    DOWNLOAD_SECRET_KEY: Optional[str] = None
    DOWNLOAD_RATE_LIMIT: str = "10/minute"

    # Voice pack samples
    MEDIA_ROOT: str = "media"
    MEDIA_URL: str = "/media"
    SAMPLE_DURATION_SECONDS: int = 20
    FFMPEG_PATH: str = "ffmpeg"
    FFPROBE_PATH: str = "ffprobe"

    FRONTEND_URL: str = "http://localhost:3000"

    @property
    def DOWNLOAD_SIGNING_KEY(self) -> str:
        return self.DOWNLOAD_SECRET_KEY or f"{self.SECRET_KEY}:download"

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql+psycopg2://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True)

settings = Settings()

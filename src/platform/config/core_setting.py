from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


def _split_comma_separated(v: str | List[str]) -> List[str]:
    if isinstance(v, str) and not v.startswith('['):
        return [i.strip() for i in v.split(',') if i.strip()]
    elif isinstance(v, list):
        return v
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Indok Membership API'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    DEPLOY_ENV: str = 'local_dev'
    SERVICE_NAME: str = 'membership-api'

    # Security / session
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    SESSION_COOKIE_NAME: str = 'indok_session'
    SESSION_COOKIE_DOMAIN: str | None = None
    SESSION_COOKIE_HTTP_ONLY: bool = True
    SESSION_COOKIE_SECURE: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # add your frontend URL here

    # Allowed origins for login redirects and payment return urls
    REDIRECT_ORIGINS: Annotated[List[str], NoDecode] = ['http://localhost:3000']

    @field_validator('BACKEND_CORS_ORIGINS', 'REDIRECT_ORIGINS', mode='before')
    @classmethod
    def assemble_origins(cls, v: str | List[str]) -> List[str]:
        return _split_comma_separated(v)

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'membership'

    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    @property
    def DATABASE_URL_SYNC(self) -> str:
        return (
            f'postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Redis (sessions state, arq job queue)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ''
    REDIS_DECODE_RESPONSES: bool = True
    REDIS_POOL_MAX_CONNECTIONS: int = 50
    REDIS_POOL_SOCKET_TIMEOUT: int = 10  # seconds
    REDIS_POOL_SOCKET_CONNECT_TIMEOUT: int = 10  # seconds
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # seconds

    # Feide OpenID Connect
    FEIDE_BASE_URL: str = 'https://auth.dataporten.no'
    FEIDE_CLIENT_ID: str = ''
    FEIDE_CLIENT_SECRET: SecretStr = SecretStr('')
    SERVER_URL: str = 'http://localhost:4000'
    CLIENT_URL: str = 'https://indokntnu.no'
    AUTH_STATE_TTL_SECONDS: int = 600

    # Mail
    CONTACT_EMAIL: str = 'contact@indokntnu.no'
    NO_REPLY_EMAIL: str = 'no-reply@indokntnu.no'
    POSTMARK_API_TOKEN: SecretStr = SecretStr('')
    POSTMARK_BASE_URL: str = 'https://api.postmarkapp.com'

    # Vipps ePayment
    VIPPS_TEST_MODE: bool = True

    @property
    def VIPPS_BASE_URL(self) -> str:
        return 'https://apitest.vipps.no' if self.VIPPS_TEST_MODE else 'https://api.vipps.no'

    # File storage (S3 compatible)
    S3_BUCKET: str = 'indok-files'
    S3_REGION: str = 'eu-north-1'
    S3_ENDPOINT_URL: str | None = None
    FILE_UPLOAD_URL_EXPIRES_SECONDS: int = 600
    FILE_DOWNLOAD_URL_EXPIRES_SECONDS: int = 3600

    # Observability
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ''
    OTEL_CONSOLE_EXPORTER: bool = False


settings = Settings()  # type: ignore

from functools import lru_cache
from typing import Literal, Optional
from urllib.parse import quote_plus
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
VerifierName = Literal["unverified", "firebase"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ApparelsAPI"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Mongo
    MONGO_URI: Optional[str] = None            # full URI wins over the Atlas parts below
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    MONGO_HOST: str = "cluster0.fqpbo6u.mongodb.net"
    MONGO_DB: str = "apparelsDB"
    MONGO_REQUIRED: bool = False               # abort startup if the initial ping fails
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 6000
    MONGO_CONNECT_TIMEOUT_MS: int = 6000
    MONGO_SOCKET_TIMEOUT_MS: int = 10000

    # Collections
    PRODUCT_COLLECTION: str = "product"
    MODERATOR_COLLECTION: str = "moderators"

    # HTTP
    MAX_BODY_MB: int = 10
    ALLOWED_ORIGINS: str = ""                  # CSV; empty = any origin

    # Auth
    AUTH_VERIFIER: VerifierName = "unverified"
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None

    # API
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, extra="ignore")

    @property
    def mongo_uri(self) -> Optional[str]:
        """
        Connection string: MONGO_URI as-is, otherwise an Atlas SRV URI built
        from DB_USER / DB_PASS / MONGO_HOST. None when neither is configured.
        """
        if self.MONGO_URI:
            return self.MONGO_URI
        if self.DB_USER and self.DB_PASS:
            return (
                f"mongodb+srv://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASS)}@{self.MONGO_HOST}/"
                "?retryWrites=true&w=majority&appName=Cluster0"
            )
        return None

    @property
    def max_body_bytes(self) -> int:
        return self.MAX_BODY_MB * 1024 * 1024

    @property
    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )

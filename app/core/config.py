from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # PostgreSQL Configuration
    postgres_user: str = Field(default="admin")
    postgres_password: str = Field(default="admin")
    postgres_db: str = Field(default="sidematch")
    postgres_host: str = Field(default="db")
    postgres_port: int = Field(default=5432)
    # Full SQLAlchemy URL; overrides the POSTGRES_* parts when set
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Application Configuration
    app_env: str = Field(default="dev")
    log_level: str = Field(default="INFO")
    api_port: int = Field(default=4000)
    jwt_secret: str = Field(
        default="change-me-in-production-use-a-secure-random-string"
    )
    access_token_expires: int = Field(default=900)  # 15 minutes
    enable_debug_routes: Optional[bool] = Field(default=None)

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    @property
    def debug_routes_enabled(self) -> bool:
        """Debug ledger routes default to on only for dev and test environments."""
        if self.enable_debug_routes is not None:
            return self.enable_debug_routes
        return self.app_env in ("dev", "test")

    # CORS - allow frontend origins (filter out None values)
    allowed_origins: List[str] = [
        origin for origin in [
            "http://localhost:5173",  # Vite dev server
            "http://localhost:3000",
            os.getenv("FRONTEND_URL")
        ] if origin is not None
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


settings = Settings()

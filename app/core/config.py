from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    env: Literal["prod", "dev"] = "prod"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: str = "*"
    static_dir: str | None = None
    """Directory served at / for the bundled frontend, disabled when unset"""

    # Storage
    db_path: str = "leaderboard.db"
    db_url: str | None = None
    """Full async SQLAlchemy URL, takes precedence over db_path"""
    auto_create_tables: bool = True

    # Leaderboard
    leaderboard_size: int = 10

    # Submission limits
    rate_limit_max: int = 5
    rate_limit_window_seconds: int = 60
    trusted_proxy_hops: int = 1
    max_body_bytes: int = 20 * 1024  # 20 KB

    # Logging
    log_level: str = "INFO"
    log_file: str = "backend.log"

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return f"sqlite+aiosqlite:///{self.db_path}"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


load_dotenv()
settings = Config()

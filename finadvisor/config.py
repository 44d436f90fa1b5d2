import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env

DEFAULT_API_URL = "http://localhost:5000"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime configuration, read from the environment."""

    database_url: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)
    log_level: str = "INFO"
    api_url: str = DEFAULT_API_URL
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_url=os.getenv("FINADVISOR_API_URL", DEFAULT_API_URL).rstrip("/"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
        )

    def require_database_url(self) -> str:
        if not self.database_url:
            raise RuntimeError("DATABASE_URL environment variable is not set")
        return self.database_url

"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK (Junior Developer Guide) ───────────────────────
#
# This class uses pydantic-settings to automatically read configuration
# from TWO sources (in priority order):
#
#   1. **Environment variables** - e.g., RAGKB_WORKER_COUNT=8
#      (highest priority - always wins)
#   2. **.env file** - key=value lines in the project root .env file
#      (lower priority - used for local development)
#
# Every field is read with the ``RAGKB_`` prefix: field ``database_path``
# maps to env var ``RAGKB_DATABASE_PATH``.
#
# Default values are used when neither an env var nor .env entry exists.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ragkb application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RAGKB_",
        extra="ignore",
    )

    # === Storage ===
    database_path: str = "data/ragkb.db"
    # Seconds a connection waits on a locked database before failing.
    database_busy_timeout: float = 30.0

    # === Worker Pool ===
    worker_count: int = Field(default=5, ge=1)
    poll_interval_seconds: float = Field(default=1.0, gt=0)

    # === Fetching ===
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    fetch_user_agent: str = "Mozilla/5.0 (compatible; ragkb/0.1)"

    # === Ingestion ===
    max_chunk_chars: int = Field(default=1000, ge=1)
    embedding_dimension: int = Field(default=1536, ge=1)

    # === Retrieval ===
    # Chunks farther than this cosine distance from the query are dropped.
    similarity_threshold: float = 0.5
    query_result_limit: int = Field(default=5, ge=1)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_BACKENDS = {"file", "redis"}


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Semantic cache
    semantic_cache_threshold: float = float(os.getenv("SEMANTIC_CACHE_THRESHOLD", "0.9"))
    semantic_cache_max_size: int = int(os.getenv("SEMANTIC_CACHE_MAX_SIZE", "1000"))
    semantic_cache_backend: str = os.getenv("SEMANTIC_CACHE_BACKEND", "file")
    semantic_cache_path: str = os.getenv("SEMANTIC_CACHE_PATH", os.path.join(os.getcwd(), "cache.json"))

    # Redis (only used when SEMANTIC_CACHE_BACKEND=redis)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    semantic_cache_redis_key: str = os.getenv("SEMANTIC_CACHE_REDIS_KEY", "nl2sql:semantic_cache")

    # Ollama (embeddings + SQL generation)
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "embeddinggemma")
    generation_model: str = os.getenv("GENERATION_MODEL", "qwen2.5-coder")
    generation_timeout: float = float(os.getenv("GENERATION_TIMEOUT", "60"))
    # Schema document (.json) or plain-text description for generation prompts
    schema_context_path: str | None = os.getenv("SCHEMA_CONTEXT_PATH")
    # false: /insights always answers with the deterministic fallback
    insights_enabled: bool = os.getenv("INSIGHTS_ENABLED", "true").lower() == "true"

    # Remote execution API
    external_db_url: str = os.getenv("EXTERNAL_DB_URL", "http://localhost:8080")
    external_db_path: str = os.getenv("EXTERNAL_DB_PATH", "/avidan/restService/onecert/report.action")
    execution_timeout: float = float(os.getenv("EXECUTION_TIMEOUT", "30"))

    # Guardrails
    max_question_length: int = int(os.getenv("MAX_QUESTION_LENGTH", "500"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def uses_redis(self) -> bool:
        """Check if the cache snapshot lives in Redis instead of a local file."""
        return self.semantic_cache_backend == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 < self.semantic_cache_threshold <= 1:
            raise ValueError("SEMANTIC_CACHE_THRESHOLD must be in (0, 1] for cosine similarity")

        if self.semantic_cache_max_size <= 0:
            raise ValueError(
                f"SEMANTIC_CACHE_MAX_SIZE must be positive, got {self.semantic_cache_max_size}"
            )

        if self.semantic_cache_backend not in _VALID_BACKENDS:
            raise ValueError(
                f"SEMANTIC_CACHE_BACKEND must be one of {sorted(_VALID_BACKENDS)}, "
                f"got {self.semantic_cache_backend!r}"
            )

        if self.log_level not in _VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_VALID_LOG_LEVELS)}, got {self.log_level!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Install the root log format used by the API process."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

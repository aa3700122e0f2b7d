"""Application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "ResumeMatch Scoring API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Settings
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # Caching
    cache_ttl: int = 300  # seconds
    llm_cache_ttl: int = 86400  # seconds

    # Redis Cache
    redis_url: str | None = None
    redis_tls: bool = False

    # Gemini API for AI judgments and embeddings
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_embedding_model: str = "text-embedding-004"
    ats_llm_temperature: float = 0.3
    hr_llm_temperature: float = 0.4

    # Scoring features
    enable_supplementary_ats: bool = True
    enable_llm_review: bool = True
    enable_semantic_analysis: bool = True
    ats_strict_matching: bool = False

    # Reference resume corpus (HR formatting layer)
    reference_corpus_key: str = "reference_resumes"
    reference_corpus_limit: int = 50

    class Config:
        env_prefix = "RESUMEMATCH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

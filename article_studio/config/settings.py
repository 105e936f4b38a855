"""Configuration settings for the article studio."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys (LiteLLM reads GEMINI_API_KEY and friends from the environment itself)
    anthropic_api_key: str = os.getenv("ANTHROPIC_API_KEY", "")
    tavily_api_key: str = os.getenv("TAVILY_API_KEY", "")

    # Model Configuration
    generation_model: str = "gemini/gemini-2.5-flash"
    fact_check_model: str = "gemini/gemini-2.5-flash"
    image_model: str = "gemini/imagen-4.0-generate-001"
    max_tokens: int = 8192

    # Pipeline
    stage_timeout_seconds: Optional[float] = None  # None = no per-stage limit

    # Variant generation
    max_concurrent_variants: int = 4
    variant_timeout_seconds: Optional[float] = 600.0

    # Comparison heuristics
    optimal_sentence_length: int = 75

    # Persistence: "memory" | "json" | "firestore"
    storage_backend: str = "memory"
    firestore_collection_prefix: str = "article_studio_"

    # Paths
    package_dir: Path = Path(__file__).parent.parent
    config_dir: Path = package_dir / "config"
    storage_dir: Path = Path("data") / "store"  # relative to the working directory

    # Config files
    variations_file: Path = config_dir / "variations.yaml"

    class Config:
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()

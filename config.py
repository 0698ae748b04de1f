"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration"""

    # LLM Configuration
    ANTHROPIC_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None  # Gemini API key

    # LLM Provider Priority (comma-separated: openai,anthropic,gemini)
    LLM_PROVIDER_PRIORITY: str = "openai,anthropic,gemini"

    # LLM Model Selection
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    OPENAI_MODEL: str = "gpt-4o-mini"
    GEMINI_MODEL_ID: str = "gemini-2.5-flash"

    # LLM Settings
    LLM_MAX_TOKENS: int = 1000
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_RETRIES: int = 3
    LLM_RETRY_DELAY: float = 2.0  # seconds
    LLM_TIMEOUT: float = 60.0  # seconds

    # Grid
    DEFAULT_ROW_COUNT: int = 25
    DEFAULT_COLUMN_COUNT: int = 11  # A-K
    ROW_GROWTH_STEP: int = 10
    COLUMN_GROWTH_STEP: int = 5
    CAPACITY_MARGIN: int = 5

    # Chat
    CHAT_HISTORY_TURNS: int = 10
    CONTEXT_PREVIEW_ROWS: int = 20
    CHART_MAX_CATEGORIES: int = 6
    NUMERIC_COLUMN_THRESHOLD: float = 0.7
    FUZZY_MATCH_THRESHOLD: int = 80

    # Storage
    DATA_DIR: str = "./data"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_llm_provider_priority(self) -> List[str]:
        """Get LLM provider priority list"""
        return [p.strip() for p in self.LLM_PROVIDER_PRIORITY.split(",") if p.strip()]

    def get_data_path(self, subdir: str = "") -> Path:
        """Get data directory path"""
        path = Path(self.DATA_DIR) / subdir
        path.mkdir(parents=True, exist_ok=True)
        return path


settings = Settings()

"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Sales Practice API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # LLM endpoint (any OpenAI-compatible chat/completions server, LM Studio by default)
    llm_endpoint: str = "http://localhost:1234/v1/chat/completions"
    llm_model: str = "mistral-7b-instruct"
    llm_api_key: Optional[str] = None  # local servers usually need none
    llm_timeout: float = 30.0  # seconds, applied to every completion call

    # Roleplay turns
    chat_temperature: float = 0.7
    chat_max_tokens: int = 500

    # Post-session analysis
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 1000

    # CORS
    cors_origins: list[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/sales_practice.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    default_language: str = "pl"

    ocr_engine: str = "tesseract"
    ocr_languages: str = "pol+eng"
    ocr_engine_dpi: int = 300
    tesseract_cmd: str = ""

    local_confidence_threshold: float = 75.0
    vision_only: bool = False
    accept_weak_local_on_vision_failure: bool = False

    vision_provider: str = "openai"
    vision_timeout_seconds: int = 300
    vision_max_completion_tokens: int = 4096
    vision_max_dimension: int = 768
    vision_concurrency: int = 3

    vision_openai_api_key: str = ""
    vision_openai_model_name: str = "gpt-4o"
    vision_openai_compatible_api_key: str = ""
    vision_openai_compatible_model_name: str = ""
    vision_openai_compatible_base_url: str = ""
    vision_openrouter_api_key: str = ""
    vision_openrouter_model_name: str = ""
    vision_ollama_api_key: str = "ollama"
    vision_ollama_model_name: str = "qwen3-vl"

    use_async_vision_queue: bool = True
    vision_queue_redis_url: str = ""
    vision_queue_name: str = "vision-jobs"
    vision_queue_timeout_seconds: int = 300
    vision_queue_poll_interval_seconds: float = 0.5

    pdf_engine: str = "pdfplumber"
    pdf_rasterizer: str = "poppler"
    poppler_path: str = ""
    pdf_rasterize_dpi: int = 200
    pdf_max_pages: int = 10

    max_file_size_mb: int = 10
    max_audio_file_size_mb: int = 25
    page_concurrency: int = Field(default_factory=lambda: os.cpu_count() or 1)
    page_timeout_seconds: int = 300

    stt_provider: str = "none"
    stt_openai_api_key: str = ""
    stt_model_name: str = "whisper-1"
    stt_base_url: str = ""
    stt_timeout_seconds: int = 300

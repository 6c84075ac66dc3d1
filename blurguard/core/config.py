from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Sensitive Region Redaction Service"

    # AI Config (OpenAI-compatible chat completions endpoint)
    AI_API_KEY: Optional[str] = None
    AI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    UNDERSTANDING_MODEL: str = "gemini-3-flash-preview"
    DETECTION_PROMPT: Optional[str] = None
    SENSITIVE_DATA_TYPES: List[str] = [
        "email addresses",
        "phone numbers",
        "personal names",
        "home or work addresses",
        "credit card or bank account numbers",
        "license plates",
        "personal IDs",
        "API keys and passwords",
    ]

    # Redaction Config
    BLUR_INTENSITY: int = 25
    BACKUP_SUFFIX: str = "_backup"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()

# backend configuration
# loads env vars for the gemini classifier, cors and reference data seeding

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # gemini (for cbt thought-pattern classification)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    CLASSIFIER_TEMPERATURE: float = 0.3
    CLASSIFIER_MAX_OUTPUT_TOKENS: int = 1024
    CLASSIFIER_TIMEOUT_SECONDS: float = float(os.getenv("CLASSIFIER_TIMEOUT_SECONDS", "30"))

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # static thought patterns + meditations loaded when the store opens
    SEED_REFERENCE_DATA: bool = True

    # cbt journal validation
    SITUATION_MIN_LENGTH: int = 5
    EMOTION_MIN_LENGTH: int = 2
    THOUGHT_MIN_LENGTH: int = 5

    # guided sessions nobody touches for this long are dropped
    SESSION_IDLE_TTL_SECONDS: float = float(os.getenv("SESSION_IDLE_TTL_SECONDS", "3600"))

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

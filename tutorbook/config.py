"""Configuration - typed loading of environment variables"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from tutorbook.domain.errors import ConfigLoadError


@dataclass(frozen=True)
class AppConfig:
    """Application settings"""
    project_id: str = ""  # empty disables notice scanning
    vertex_ai_location: str = "us-central1"
    gemini_model: str = "gemini-2.5-flash"
    timezone: str = "Asia/Ho_Chi_Minh"
    ai_timeout_seconds: float = 30.0

    @property
    def ai_enabled(self) -> bool:
        return bool(self.project_id)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load settings from the environment (and .env)"""
        load_dotenv()

        timeout_raw = os.getenv("AI_TIMEOUT_SECONDS", "30")
        try:
            ai_timeout_seconds = float(timeout_raw)
        except ValueError:
            raise ConfigLoadError(
                f"AI_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}"
            ) from None
        if ai_timeout_seconds <= 0:
            raise ConfigLoadError("AI_TIMEOUT_SECONDS must be positive")

        return cls(
            project_id=os.getenv("PROJECT_ID", ""),
            vertex_ai_location=os.getenv("VERTEX_AI_LOCATION", "us-central1"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            timezone=os.getenv("TIMEZONE", "Asia/Ho_Chi_Minh"),
            ai_timeout_seconds=ai_timeout_seconds,
        )

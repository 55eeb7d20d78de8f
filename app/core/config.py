from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "MedScena Scenario API"
    PROJECT_VERSION: str = "1.0.0"

    # Server
    PORT: int = 5000

    # AI Config
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_TOP_P: float = 1.0
    GEMINI_TOP_K: int = 1
    GEMINI_MAX_OUTPUT_TOKENS: int = 2048
    GEMINI_TIMEOUT_SECONDS: Optional[float] = None  # None = wait for the provider

    # CORS
    FRONTEND_URL: Optional[str] = None
    ALLOWED_ORIGINS: List[str] = [
        "https://frontend-medscena-tysg-8maubhtdz.vercel.app",
        "https://frontend-medscena-8tl7.vercel.app",
        "http://localhost:5173",
    ]

    # Rate limiting (15 minute window)
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100

    MAX_SCENARIOS_PER_REQUEST: int = 10

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def allowed_origins(self) -> List[str]:
        origins = list(self.ALLOWED_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Languages
    SOURCE_LANGUAGE: str = Field("en")
    TARGET_LANGUAGE: str = Field("")  # empty = no translation, speak the original

    # Translation
    TRANSLATION_TIMEOUT_SEC: float = Field(5.0)
    MAX_CONCURRENT_TRANSLATIONS: int = Field(4)

    # Google Cloud
    GOOGLE_APPLICATION_CREDENTIALS: str | None = Field(None)
    GOOGLE_PROJECT_ID: str | None = Field(None)

    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(8000)
    DEBUG: bool = Field(True)
    LOG_LEVEL: str = Field("INFO")
    METRICS_ENABLED: bool = Field(False)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()

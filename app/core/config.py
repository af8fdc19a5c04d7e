"""Application configuration via pydantic-settings.

Settings come from the environment (or a ``.env`` file).  Only the
Supabase credentials are required; table names default to the
interview platform's schema.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Table names in the interview platform schema
    USERS_TABLE: str = "users"
    INTERVIEWS_TABLE: str = "Interviews"
    RESULTS_TABLE: str = "interview_results"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()  # type: ignore[call-arg]

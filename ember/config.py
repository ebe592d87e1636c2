from typing import List, Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration with environment variable mapping.
    All settings can be defined in .env file or as environment variables.
    """

    # Core settings
    PROJECT_NAME: str = Field(default="Ember", env="PROJECT_NAME")
    PROJECT_DESCRIPTION: str = Field(
        default="Guided focus sessions for life-balance categories",
        env="PROJECT_DESCRIPTION",
    )
    ENVIRONMENT: Literal["dev", "prod"] = Field(default="dev", env="ENVIRONMENT")
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")
    BACKEND_CORS_ORIGINS: str = Field(default="*", env="BACKEND_CORS_ORIGINS")

    # OpenAI
    OPENAI_API_KEY: str = Field(default="", env="OPENAI_API_KEY")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", env="OPENAI_MODEL")
    OPENAI_TIMEOUT: float = Field(default=60.0, env="OPENAI_TIMEOUT")
    OPENAI_MAX_RETRIES: int = Field(default=2, env="OPENAI_MAX_RETRIES")
    OPENAI_TEMPERATURE: float = Field(default=0.7, env="OPENAI_TEMPERATURE")

    # Canned responses when OpenAI is not configured. Unset means "dev only".
    OFFLINE_MODE: Optional[bool] = Field(default=None, env="OFFLINE_MODE")

    # Focus session storage
    FOCUS_STORE_BACKEND: Literal["memory", "sql"] = Field(
        default="memory", env="FOCUS_STORE_BACKEND"
    )
    FOCUS_SESSION_TTL_SECONDS: int = Field(
        default=30 * 24 * 60 * 60, env="FOCUS_SESSION_TTL_SECONDS"
    )
    FOCUS_SESSION_MAX_RECORDS: int = Field(
        default=10_000, env="FOCUS_SESSION_MAX_RECORDS"
    )

    # Database
    DATABASE_PATH: str = Field(default="./ember.db", env="DATABASE_PATH")
    SQL_ECHO: bool = Field(default=False, env="SQL_ECHO")

    # Supabase (latest wheel ratings)
    SUPABASE_URL: str = Field(default="", env="SUPABASE_URL")
    SUPABASE_KEY: str = Field(default="", env="SUPABASE_KEY")

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def offline_mode_enabled(self) -> bool:
        if self.OFFLINE_MODE is None:
            return self.ENVIRONMENT == "dev"
        return self.OFFLINE_MODE

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",")]


settings = Settings()

"""Application settings and configuration.

This module defines all configuration options for the BlogOnSpot API.
Settings are loaded from environment variables (or a `.env` file). The token
signing secret and the admin signup key have no defaults: the application
refuses to start without them.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="BlogOnSpot", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY", min_length=1)
    admin_key: str = Field(alias="ADMIN_KEY", min_length=1)
    bcrypt_rounds: int = Field(default=10, ge=4, le=16, alias="BCRYPT_ROUNDS")

    # Database configuration
    database_url: str = Field(default="sqlite:///./blogonspot.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Generative AI (summaries and originality assessment)
    ai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    ai_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="AI_BASE_URL",
    )
    ai_models: list[str] = Field(
        default=[
            "gemini-2.5-flash",
            "gemini-1.5-flash",
            "gemini-1.5-pro",
            "gemini-pro",
        ],
        alias="AI_MODELS",
    )
    ai_timeout_seconds: float = Field(default=30.0, gt=0, alias="AI_TIMEOUT_SECONDS")

    # Similarity scorer bounds
    plagiarism_candidate_limit: int = Field(
        default=500, ge=1, alias="PLAGIARISM_CANDIDATE_LIMIT"
    )
    plagiarism_top_matches: int = Field(default=5, ge=1, alias="PLAGIARISM_TOP_MATCHES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:3000",
        ],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def ai_enabled(self) -> bool:
        """Return True when an API key for the AI provider is configured."""
        return bool(self.ai_api_key)

    @property
    def effective_log_level(self) -> str:
        """Return the log level, forcing DEBUG when debug mode is on."""
        return "DEBUG" if self.debug else self.log_level.upper()


settings = Settings()  # type: ignore[call-arg]

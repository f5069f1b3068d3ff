"""Application settings and configuration."""

from typing import Literal

from pydantic import Field, field_validator, model_validator  # type: ignore
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore

from academy.grading.contracts import check_cutoffs


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENV: Literal["dev", "staging", "prod", "test"] = Field(default="dev")
    PROJECT_NAME: str = Field(default="Academy Grading API")

    # API
    API_PREFIX: str = Field(default="/v1")

    # CORS - Accept string or list, will be normalized to list
    CORS_ORIGINS: str | list[str] = Field(
        default="http://localhost:3000,http://localhost:5173", validate_default=True
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Grade bands used when an exam carries no cutoffs of its own.
    # Ascending upper percentile bounds; grade k covers (bound[k-2], bound[k-1]].
    DEFAULT_GRADE_CUTOFFS: str | list[float] = Field(default="25,50,75,100", validate_default=True)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse comma-separated CORS_ORIGINS into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("DEFAULT_GRADE_CUTOFFS", mode="before")
    @classmethod
    def parse_cutoffs(cls, v):
        """Parse comma-separated DEFAULT_GRADE_CUTOFFS into floats."""
        if isinstance(v, str):
            v = [float(bound.strip()) for bound in v.split(",") if bound.strip()]
        return check_cutoffs(v)

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Fail fast in production on a wildcard CORS policy."""
        if self.ENV == "prod" and "*" in self.CORS_ORIGINS:
            raise ValueError("CORS_ORIGINS must list explicit origins in production")
        return self


# Global settings instance
settings = Settings()

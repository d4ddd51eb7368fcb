from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imgconv.core.constants import DEFAULT_QUALITY, TARGET_FORMATS


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="Image Form Converter", description="Application name")
    env: str = Field(
        default="development", description="Environment (development/production)"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # API Configuration
    api_host: str = Field(default="127.0.0.1", description="API host to bind to")
    api_port: int = Field(default=8000, description="API port")
    api_prefix: str = Field(default="/api", description="API route prefix")
    cors_origins: Union[str, List[str]] = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins",
    )

    # File selection
    max_file_size: int = Field(
        default=5000000, description="Max selected file size in bytes (5MB)"
    )
    default_accept: str = Field(
        default="image/gif, image/jpeg, image/png, image/webp",
        description="Accept declaration used for new file inputs",
    )
    default_target_format: str = Field(
        default="webp", description="Target format selected by default"
    )
    default_quality: float = Field(
        default=DEFAULT_QUALITY, description="Default quality fraction (0-1)"
    )

    # Uploads
    upload_dir: str = Field(
        default="images/converted", description="Directory for uploaded files"
    )
    upload_url: str = Field(
        default="http://127.0.0.1:8000/upload",
        description="Endpoint the submission client posts to",
    )
    upload_timeout: float = Field(
        default=30.0, description="Submission request timeout in seconds"
    )

    # Logging Configuration
    logging_enabled: bool = Field(default=True, description="Enable file logging")
    log_dir: str = Field(default="./logs", description="Directory for log files")
    max_log_size_mb: int = Field(
        default=10, description="Maximum size of each log file in MB"
    )
    log_backup_count: int = Field(
        default=3, description="Number of backup log files to keep"
    )
    log_retention_hours: int = Field(
        default=24, description="Hours to retain log files"
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v):
        allowed = ["development", "production", "testing"]
        if v not in allowed:
            raise ValueError(f"env must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("api_port")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("api_port must be between 1 and 65535")
        return v

    @field_validator("max_file_size")
    @classmethod
    def validate_max_file_size(cls, v):
        if v <= 0:
            raise ValueError("max_file_size must be positive")
        return v

    @field_validator("default_target_format")
    @classmethod
    def validate_target_format(cls, v):
        v = v.lower()
        if v not in TARGET_FORMATS:
            raise ValueError(f"default_target_format must be one of {list(TARGET_FORMATS)}")
        return v

    @field_validator("default_quality")
    @classmethod
    def validate_quality(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError("default_quality must be between 0 and 1")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="IMGCONV_",
        env_parse_none_str=None,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_comma_separated_list(cls, v):
        """Parse comma-separated string into list."""
        if isinstance(v, str):
            if not v:
                return []
            return [item.strip() for item in v.split(",") if item.strip()]
        elif isinstance(v, list):
            return v
        else:
            return cls.parse_comma_separated_list(str(v))


settings = Settings()

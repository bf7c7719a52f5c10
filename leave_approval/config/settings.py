"""
Environment configuration for the leave approval workflow.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from leave_approval.models.base.enums import LeaveStage

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


def _split_stage_list(value: str) -> List[str]:
    """Accept either a JSON list or a comma separated string."""
    value = value.strip()
    if value.startswith('[') and value.endswith(']'):
        try:
            return [str(item).strip().lower() for item in json.loads(value)]
        except json.JSONDecodeError:
            pass
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = "College Leave Approval"
    API_VERSION: str = "v1"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./leave_approval.db"
    DATABASE_ECHO: bool = False

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    ENABLE_STRUCTURED_LOGGING: bool = False

    # Approval workflow
    LEAVE_BASE_STAGES: str = Field(
        default="mentor,hod,principal",
        description="Ordered stages every leave request passes through",
    )
    LEAVE_HOSTEL_STAGES: str = Field(
        default="warden",
        description="Ordered stages appended for hostel residents",
    )
    LEAVE_ALLOW_MULTIPLE_PENDING: bool = False

    # Leave pass QR codes
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 2

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return fmt

    @field_validator('LEAVE_BASE_STAGES', 'LEAVE_HOSTEL_STAGES')
    @classmethod
    def validate_stage_list(cls, v: str) -> str:
        """Reject stage names outside the known approval stages."""
        stages = _split_stage_list(v)
        known = {stage.value for stage in LeaveStage}
        unknown = [stage for stage in stages if stage not in known]
        if unknown:
            raise ValueError(f"Unknown approval stage(s): {', '.join(unknown)}")
        if len(set(stages)) != len(stages):
            raise ValueError("Approval stages must not repeat")
        return ",".join(stages)

    def get_base_stages(self) -> List[LeaveStage]:
        """Ordered base approval stages."""
        return [LeaveStage(stage) for stage in _split_stage_list(self.LEAVE_BASE_STAGES)]

    def get_hostel_stages(self) -> List[LeaveStage]:
        """Ordered stages appended for hostel residents."""
        return [LeaveStage(stage) for stage in _split_stage_list(self.LEAVE_HOSTEL_STAGES)]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()

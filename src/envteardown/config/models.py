"""Pydantic models for configuration schema."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Settings(BaseModel):
    """Settings read from envteardown.yaml."""

    model_config = ConfigDict(extra="forbid")

    state_dir: str = Field(".", min_length=1, description="Directory holding the state file")
    log_level: str = Field("warning", pattern="^(debug|info|warning|error)$")
    log_dir: Optional[str] = Field(".envteardown/logs", description="JSON log directory")
    terraform_binary: str = Field("terraform", min_length=1)
    bosh_binary: str = Field("bosh", min_length=1)
    gcloud_binary: str = Field("gcloud", min_length=1)
    aws_profile: Optional[str] = Field(
        None, description="Profile used when the state records no AWS keys"
    )

    @field_validator("log_dir")
    @classmethod
    def validate_log_dir(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty log directory as disabling file logging."""
        if v is not None and not v.strip():
            return None
        return v

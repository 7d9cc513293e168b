"""Configuration models loaded from YAML."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    level: str = "normal"
    log_file: Optional[str] = None
    audit_log_dir: Optional[str] = Field(
        default=None,
        description="Directory for the JSON-lines audit trail of store lookups; omit to disable.",
    )


class ValidationConfig(BaseModel):
    default_asset_type: str = "email"
    default_audience: str = "hcp"
    block_on_invalid: bool = True


class SettingsConfig(BaseModel):
    database_path: str = "data/evidence.db"
    default_brand_id: Optional[str] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

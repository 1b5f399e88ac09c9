"""
Configuration management for the compliance engine.

Loads settings from environment variables. Validates all settings and
provides typed access.
"""

import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict


class EngineConfig(BaseModel):
    """Compliance engine configuration loaded from environment."""

    # ========================================================================
    # Storage
    # ========================================================================

    db_path: Path = Field(
        default=Path("ai_compliance.db"),
        description="SQLite database holding systems and assessments"
    )

    # ========================================================================
    # Signing
    # ========================================================================

    signing_key_file: Optional[Path] = Field(
        default=None,
        description="Path to Ed25519 signing key (generated on first use)"
    )

    sign_assessments: bool = Field(
        default=False,
        description="Sign every new assessment record"
    )

    # ========================================================================
    # Logging
    # ========================================================================

    log_level: str = Field(
        default="INFO",
        description="Engine log level"
    )

    # ========================================================================
    # Validators
    # ========================================================================

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
            raise ValueError('log_level must be DEBUG, INFO, WARNING, or ERROR')
        return v

    @model_validator(mode='after')
    def validate_signing(self):
        if self.sign_assessments and self.signing_key_file is None:
            raise ValueError('signing_key_file required when sign_assessments is enabled')
        return self

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )


def load_config() -> EngineConfig:
    """
    Load configuration from environment variables.

    Returns:
        EngineConfig: Validated configuration

    Raises:
        ValueError: If settings are invalid
    """
    config_dict = {
        'db_path': Path(os.environ.get('AI_COMPLIANCE_DB_PATH', 'ai_compliance.db')),
        'signing_key_file': os.environ.get('AI_COMPLIANCE_SIGNING_KEY_FILE') or None,
        'sign_assessments': os.environ.get('AI_COMPLIANCE_SIGN_ASSESSMENTS', 'false').lower() == 'true',
        'log_level': os.environ.get('AI_COMPLIANCE_LOG_LEVEL', 'INFO'),
    }

    return EngineConfig(**config_dict)

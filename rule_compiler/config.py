"""
Type-safe configuration for the rule compiler using Pydantic Settings.

Settings are loaded from environment variables (prefixed ``RULE_COMPILER_``)
or a .env file.

Usage:
    from rule_compiler.config import config

    if config.enforce_formats:
        ...
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuleCompilerConfig(BaseSettings):
    """
    Central configuration for the rule compiler.
    """
    model_config = SettingsConfigDict(
        env_prefix="RULE_COMPILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ============================================================================
    # Logging
    # ============================================================================

    log_level: str = Field(default="INFO", description="Level for rule_compiler loggers (DEBUG, INFO, ...)")

    # ============================================================================
    # Leaf rule construction
    # ============================================================================

    enforce_formats: bool = Field(
        default=True,
        description="Check `format` keywords (email, date-time, ...) with jsonschema's format checker",
    )
    check_leaf_schemas: bool = Field(
        default=True,
        description="Reject invalid leaf schemas with LeafCompileError before building rules",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()


# ============================================================================
# Global Config Instance
# ============================================================================

config = RuleCompilerConfig()

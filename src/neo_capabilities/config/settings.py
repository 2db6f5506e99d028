"""
Runtime settings for neo-capabilities.

Values are read from the environment (prefix ``NEO_CAPS_``) or a ``.env`` file.
"""
from functools import lru_cache
from typing import List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError
from .constants import CapabilitySlots, PolicyDefaults


class CapabilitySettings(BaseSettings):
    """Settings that tune policy construction and resolution."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_CAPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="neo-capabilities")

    # Policy Configuration
    default_priority: int = Field(default=PolicyDefaults.PRIORITY)
    chain_priority_step: int = Field(default=PolicyDefaults.CHAIN_PRIORITY_STEP)

    # Resolution Configuration
    content_type_meta_capabilities: List[str] = Field(
        default_factory=lambda: sorted(CapabilitySlots.CONTENT_TYPE_META)
    )
    taxonomy_meta_capabilities: List[str] = Field(
        default_factory=lambda: sorted(CapabilitySlots.TAXONOMY_META)
    )

    @field_validator("chain_priority_step")
    @classmethod
    def validate_chain_priority_step(cls, v: int) -> int:
        """A chained policy must run strictly after its parent."""
        if v < 1:
            raise ValueError("chain_priority_step must be at least 1")
        return v


@lru_cache()
def get_settings() -> CapabilitySettings:
    """Get cached settings instance."""
    try:
        return CapabilitySettings()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid capability settings: {e}",
            details={"errors": e.errors()},
        ) from e


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()

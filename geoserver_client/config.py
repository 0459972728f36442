# ============================================================================
# CLAUDE CONTEXT - GEOSERVER CLIENT CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - GeoServer REST client
# PURPOSE: Environment-based connection settings for RestGeoserverClient
# EXPORTS: GeoServerClientConfig, get_geoserver_config
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: GeoServerClientConfig
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables (no dependency on main app config)
# PATTERNS: Settings Pattern, Singleton via cached function
# ENTRY_POINTS: from geoserver_client.config import get_geoserver_config
# ============================================================================

"""
GeoServer Client Configuration - Standalone

Only needed by RestGeoserverClient.from_config(). The client itself takes
its base URL and credentials as constructor arguments.

Environment Variables:
    Required:
    - GEOSERVER_BASE_URL: e.g. "http://localhost:8080/geoserver"
    - GEOSERVER_PASSWORD: Admin password

    Optional:
    - GEOSERVER_USERNAME: Admin user (default: "admin")
    - GEOSERVER_TIMEOUT: Transport timeout in seconds (default: 30)
"""

import os
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoServerClientConfig(BaseModel):
    """
    Connection settings for the GeoServer REST API.
    """

    # Values read from the environment go through the same validators
    model_config = ConfigDict(validate_default=True)

    base_url: str = Field(
        default_factory=lambda: os.getenv("GEOSERVER_BASE_URL", ""),
        description="GeoServer base URL including the context path (e.g. /geoserver)"
    )
    username: str = Field(
        default_factory=lambda: os.getenv("GEOSERVER_USERNAME", "admin"),
        description="GeoServer admin username"
    )
    password: str = Field(
        default_factory=lambda: os.getenv("GEOSERVER_PASSWORD", ""),
        description="GeoServer admin password"
    )
    timeout_seconds: float = Field(
        default_factory=lambda: os.getenv("GEOSERVER_TIMEOUT", "30"),
        ge=1,
        le=300,
        description="Transport timeout applied when the client builds its own httpx.Client"
    )

    @field_validator("base_url", "username", "password")
    @classmethod
    def validate_required(cls, v: str, info) -> str:
        """Ensure required connection fields are not empty."""
        if not v:
            raise ValueError(
                f"{info.field_name} is required - set GEOSERVER_{info.field_name.upper()} environment variable"
            )
        return v

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def parse_timeout(cls, v):
        """Raw GEOSERVER_TIMEOUT strings arrive here before float coercion."""
        try:
            return float(v)
        except (TypeError, ValueError):
            raise ValueError(f"GEOSERVER_TIMEOUT must be a number of seconds, got {v!r}")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


# Singleton instance cache
_config_cache: Optional[GeoServerClientConfig] = None


def get_geoserver_config() -> GeoServerClientConfig:
    """
    Get singleton GeoServer client configuration instance.

    Returns:
        Cached configuration instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    global _config_cache

    if _config_cache is None:
        _config_cache = GeoServerClientConfig()

    return _config_cache

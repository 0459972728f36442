# ============================================================================
# CLAUDE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Settings for the PostGIS database that GeoServer datastores connect to
# EXPORTS: AppConfig, get_app_config, validate_configuration
# DEPENDENCIES: pydantic-settings, geoserver_client.util_logger
# SOURCE: Environment variables, optional .env file
# PATTERNS: Singleton pattern for config via lru_cache
# ============================================================================

"""
Application Configuration Module

GeoServer never connects to PostGIS through this process; it is handed the
connection parameters when a datastore is created. These settings describe
that database so callers can build PostgisConnectionDetails without passing
credentials around by hand.

Environment Variables:
    Required:
    - POSTGIS_HOST: Hostname as seen from the GeoServer instance
    - POSTGIS_DATABASE: Database name
    - POSTGIS_USER: Database username
    - POSTGIS_PASSWORD: Database password

    Optional:
    - POSTGIS_PORT: PostgreSQL port (default: 5432)
    - POSTGIS_SCHEMA: Schema holding the published tables (default: "public")

Usage:
    from geoserver_client import get_app_config
    from geoserver_client import PostgisConnectionDetails

    details = PostgisConnectionDetails.from_app_config(get_app_config())
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.CONFIG, "AppConfig")


# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        postgis_host: PostgreSQL server hostname (as reachable from GeoServer)
        postgis_port: PostgreSQL server port
        postgis_database: Database name
        postgis_user: Database username
        postgis_password: Database password
        postgis_schema: Schema containing the tables to publish
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    postgis_host: str = Field(..., description="PostgreSQL hostname")
    postgis_port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    postgis_database: str = Field(..., description="Database name")
    postgis_user: str = Field(..., description="Database username")
    postgis_password: str = Field(..., description="Database password")
    postgis_schema: str = Field(default="public", description="Schema containing published tables")

    @field_validator("postgis_host", "postgis_database", "postgis_user", "postgis_password")
    @classmethod
    def validate_required(cls, v: str, info) -> str:
        """Ensure required PostgreSQL fields are not empty."""
        if not v:
            raise ValueError(f"{info.field_name.upper()} must not be empty")
        return v


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValidationError: If required environment variables are missing
    """
    return AppConfig()


# ============================================================================
# Configuration Validation
# ============================================================================

def validate_configuration() -> bool:
    """
    Validate configuration on application startup.

    Returns:
        bool: True if configuration is valid

    Raises:
        ValidationError: If configuration validation fails
    """
    try:
        config = get_app_config()
        logger.info(
            "Configuration validation passed",
            extra={'custom_dimensions': {
                'postgis_host': config.postgis_host,
                'postgis_port': config.postgis_port,
                'postgis_database': config.postgis_database,
                'postgis_user': config.postgis_user,
                'postgis_schema': config.postgis_schema
            }}
        )
        return True

    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise

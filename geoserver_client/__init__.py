# ============================================================================
# CLAUDE CONTEXT - GEOSERVER CLIENT MODULE
# ============================================================================
# STATUS: Standalone Module - GeoServer administrative REST client
# PURPOSE: Typed workspace / datastore / feature type management for GeoServer
# EXPORTS: RestGeoserverClient, domain models, connection details, exceptions
# DEPENDENCIES: httpx, pydantic, pydantic-settings
# PATTERNS: Service client, DTOs, pure wire mapping layer
# ENTRY_POINTS: from geoserver_client import RestGeoserverClient
# ============================================================================

"""
GeoServer Client - Standalone Module

Architecture:
    geoserver_client/
    ├── client.py       # RestGeoserverClient (httpx)
    ├── models.py       # Public domain dataclasses
    ├── rest_models.py  # Pydantic wire models + pure mapping functions
    ├── connection.py   # ConnectionDetails capability, PostGIS implementation
    ├── config.py       # GEOSERVER_* environment configuration
    ├── app_config.py   # POSTGIS_* settings for datastore connection details
    ├── util_logger.py  # JSON structured logging (LoggerFactory)
    └── exceptions.py   # GeoServerError hierarchy

Usage:
    from geoserver_client import (
        RestGeoserverClient, CreateWorkspaceRequest, CreateDatastoreRequest,
        PostgisConnectionDetails
    )

    with RestGeoserverClient("http://localhost:8080/geoserver", "admin", "geoserver") as client:
        client.create_workspace(CreateWorkspaceRequest("transport"))
        client.create_datastore(CreateDatastoreRequest(
            name="roads",
            type="PostGIS",
            workspace="transport",
            connection_details=PostgisConnectionDetails(
                "postgis", 5432, "postgres", "postgres", "gis"
            )
        ))
"""

from .app_config import AppConfig, get_app_config, validate_configuration
from .client import RestGeoserverClient
from .config import GeoServerClientConfig, get_geoserver_config
from .connection import ConnectionDetails, PostgisConnectionDetails, POSTGIS_TUNING_DEFAULTS
from .exceptions import GeoServerError, GeoServerConnectionError, GeoServerRequestError
from .models import (
    BoundingBox,
    CreateDatastoreRequest,
    CreateFeatureTypeRequest,
    CreateWorkspaceRequest,
    Datastore,
    FeatureType,
    GetDatastoresResponse,
    GetFeatureTypesResponse,
    GetWorkspacesResponse,
    Workspace,
)

__version__ = "1.0.0"
__all__ = [
    "AppConfig",
    "get_app_config",
    "validate_configuration",
    "RestGeoserverClient",
    "GeoServerClientConfig",
    "get_geoserver_config",
    "ConnectionDetails",
    "PostgisConnectionDetails",
    "POSTGIS_TUNING_DEFAULTS",
    "GeoServerError",
    "GeoServerConnectionError",
    "GeoServerRequestError",
    "BoundingBox",
    "CreateDatastoreRequest",
    "CreateFeatureTypeRequest",
    "CreateWorkspaceRequest",
    "Datastore",
    "FeatureType",
    "GetDatastoresResponse",
    "GetFeatureTypesResponse",
    "GetWorkspacesResponse",
    "Workspace",
]

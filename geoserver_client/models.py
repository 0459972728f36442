# ============================================================================
# CLAUDE CONTEXT - GEOSERVER DOMAIN MODELS
# ============================================================================
# STATUS: Standalone Models - public types used by callers of the client
# PURPOSE: Domain representation of workspaces, datastores and feature types
# EXPORTS: Workspace, Datastore, FeatureType, BoundingBox, Create*Request, Get*Response
# DEPENDENCIES: dataclasses, typing, connection
# PATTERNS: Data Transfer Objects (dataclasses), wire format lives in rest_models
# INDEX: Workspace:30, Datastore:76, BoundingBox:107, FeatureType:122
# ============================================================================

"""
GeoServer Domain Models

These are the shapes callers work with. They know nothing about the JSON
GeoServer expects; rest_models.py converts between the two.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .connection import ConnectionDetails


# ============================================================================
# Workspaces
# ============================================================================

@dataclass
class Workspace:
    """A GeoServer workspace. Identity is the name."""
    name: str = ""
    href: str = ""


@dataclass
class CreateWorkspaceRequest:
    """Information required to create a workspace."""
    workspace: str


@dataclass
class GetWorkspacesResponse:
    """Workspaces known to the server, possibly none."""
    workspaces: List[Workspace] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [workspace.name for workspace in self.workspaces]


# ============================================================================
# Datastores
# ============================================================================

@dataclass
class CreateDatastoreRequest:
    """
    Properties required to create a datastore.

    Attributes:
        name: Name of the datastore to create
        description: Free text description
        type: Datastore type as GeoServer names it (e.g. "postgres", "PostGIS")
        workspace: Name of the workspace to create the datastore in
        connection_details: Anything exposing entries() -> Dict[str, str]
    """
    name: str
    type: str
    workspace: str
    connection_details: ConnectionDetails
    description: str = ""


@dataclass
class Datastore:
    """
    A GeoServer datastore. Identity is (workspace, name).

    List responses only carry name/href, so the remaining fields keep
    their defaults there. get_datastore() fills all of them.
    """
    name: str = ""
    description: str = ""
    type: str = ""
    enabled: bool = False
    workspace: Workspace = field(default_factory=Workspace)
    connection_parameters: Dict[str, str] = field(default_factory=dict)
    href: str = ""


@dataclass
class GetDatastoresResponse:
    """Datastores in a workspace, possibly none."""
    datastores: List[Datastore] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [datastore.name for datastore in self.datastores]


# ============================================================================
# Feature types
# ============================================================================

@dataclass
class BoundingBox:
    """
    Rectangular spatial extent with its coordinate reference system.

    Field order follows GeoServer's (minx, maxx, miny, maxy), not the
    OGC (minx, miny, maxx, maxy) order.
    """
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    crs: str


@dataclass
class FeatureType:
    """A published layer. Identity is (workspace, datastore, name)."""
    name: str = ""
    href: str = ""


@dataclass
class CreateFeatureTypeRequest:
    """
    Information required to create a feature type.

    Attributes:
        name: Layer name, any case, may contain spaces
        native_name: Native (table) name, lowercase without spaces
        datastore: Name of the datastore publishing the table
        workspace: Name of the owning workspace
        srs: Declared SRS, e.g. "EPSG:4326"
        native_bounding_box: Extent in the native CRS
        lat_long_bounding_box: Geographic extent (defaults to native_bounding_box)
        title: Human readable title
        abstract: Human readable abstract
        native_crs: Native CRS, left for GeoServer to detect when empty
    """
    name: str
    native_name: str
    datastore: str
    workspace: str
    srs: str
    native_bounding_box: BoundingBox
    lat_long_bounding_box: Optional[BoundingBox] = None
    title: str = ""
    abstract: str = ""
    native_crs: str = ""


@dataclass
class GetFeatureTypesResponse:
    """Feature types in a datastore, possibly none."""
    feature_types: List[FeatureType] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [feature_type.name for feature_type in self.feature_types]

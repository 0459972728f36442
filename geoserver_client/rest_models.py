# ============================================================================
# CLAUDE CONTEXT - GEOSERVER REST WIRE MODELS
# ============================================================================
# STATUS: Standalone Models - JSON shapes of the GeoServer REST API
# PURPOSE: Pydantic wire models plus pure domain <-> wire mapping functions
# EXPORTS: Rest* models, new_create_*_rest_request, rest_*_to_*, *_to_rest_*
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: All Rest* classes in this file
# DEPENDENCIES: pydantic, typing, models
# SOURCE: GeoServer REST API JSON (workspaces, datastores, featuretypes)
# VALIDATION: Pydantic v2 validation - a failed parse is how quirky bodies are detected
# PATTERNS: Data Transfer Objects, pure mapping functions (no I/O, no shared state)
# INDEX: RestModel:58, Workspaces:69, Datastores:117, Feature types:222
# ============================================================================

"""
GeoServer REST Wire Models

GeoServer wraps every entity in a singular top-level key
({"workspace": {...}}, {"dataStore": {...}}, {"featureType": {...}}),
lists in a plural key holding a singular key ({"workspaces": {"workspace": [...]}}),
and serialises key/value maps as lists of {"@key": ..., "$": ...} entries.

When a collection is empty GeoServer returns the plural key with an empty
string ({"workspaces": ""}). The list response models below do not accept
that, so parsing raises ValidationError and the client falls back to an
empty result.

Every function in this module is pure.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

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

# Feature types are created reprojecting to the declared SRS
DEFAULT_PROJECTION_POLICY = "REPROJECT_TO_DECLARED"

# Class tag GeoServer expects on a feature type's store reference
DATASTORE_CLASS = "dataStore"

DEFAULT_GEOMETRY_BINDING = "com.vividsolutions.jts.geom.Point"


class RestModel(BaseModel):
    """Base for wire models: snake_case attributes, GeoServer aliases on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        """Serialise exactly as GeoServer expects it."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


# ============================================================================
# Workspaces
# ============================================================================

class RestWorkspace(RestModel):
    name: Optional[str] = None
    href: Optional[str] = None


class RestWorkspaces(RestModel):
    workspace: List[RestWorkspace] = Field(default_factory=list)


class CreateWorkspaceRestRequest(RestModel):
    workspace: RestWorkspace


class GetWorkspacesRestResponse(RestModel):
    workspaces: Optional[RestWorkspaces] = None


class GetWorkspaceRestResponse(RestModel):
    workspace: RestWorkspace


def new_create_workspace_rest_request(request: CreateWorkspaceRequest) -> CreateWorkspaceRestRequest:
    """Only the name is sent when creating a workspace."""
    return CreateWorkspaceRestRequest(workspace=RestWorkspace(name=request.workspace))


def workspace_to_rest_workspace(workspace: Workspace) -> RestWorkspace:
    return RestWorkspace(name=workspace.name, href=workspace.href or None)


def rest_workspace_to_workspace(rest_workspace: Optional[RestWorkspace]) -> Workspace:
    if rest_workspace is None:
        return Workspace()
    return Workspace(name=rest_workspace.name or "", href=rest_workspace.href or "")


def get_workspaces_rest_response_to_response(response: GetWorkspacesRestResponse) -> GetWorkspacesResponse:
    if response.workspaces is None:
        return GetWorkspacesResponse()
    return GetWorkspacesResponse(
        workspaces=[rest_workspace_to_workspace(w) for w in response.workspaces.workspace]
    )


# ============================================================================
# Datastores
# ============================================================================

class RestEntry(RestModel):
    """One connection parameter: {"@key": ..., "$": ...}."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    key: str = Field(alias="@key")
    value: str = Field(alias="$")


class RestConnectionParameters(RestModel):
    entry: List[RestEntry] = Field(default_factory=list)


class RestDatastore(RestModel):
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    enabled: Optional[bool] = None
    workspace: Optional[RestWorkspace] = None
    connection_parameters: Optional[RestConnectionParameters] = Field(
        default=None, alias="connectionParameters"
    )
    href: Optional[str] = None


class RestDatastores(RestModel):
    data_store: List[RestDatastore] = Field(default_factory=list, alias="dataStore")


class CreateDatastoreRestRequest(RestModel):
    data_store: RestDatastore = Field(alias="dataStore")


class GetDatastoreRestResponse(RestModel):
    data_store: RestDatastore = Field(alias="dataStore")


class GetDatastoresRestResponse(RestModel):
    data_stores: Optional[RestDatastores] = Field(default=None, alias="dataStores")


def map_to_entries(parameters: Dict[str, str]) -> List[RestEntry]:
    return [RestEntry(key=key, value=value) for key, value in parameters.items()]


def entries_to_map(connection_parameters: Optional[RestConnectionParameters]) -> Dict[str, str]:
    if connection_parameters is None:
        return {}
    return {entry.key: entry.value for entry in connection_parameters.entry}


def new_create_datastore_rest_request(request: CreateDatastoreRequest) -> CreateDatastoreRestRequest:
    """New datastores are always created enabled."""
    return CreateDatastoreRestRequest(
        data_store=RestDatastore(
            name=request.name,
            description=request.description,
            type=request.type,
            enabled=True,
            workspace=RestWorkspace(name=request.workspace),
            connection_parameters=RestConnectionParameters(
                entry=map_to_entries(request.connection_details.entries())
            ),
        )
    )


def datastore_to_rest_datastore(datastore: Datastore) -> RestDatastore:
    return RestDatastore(
        name=datastore.name,
        description=datastore.description,
        type=datastore.type,
        enabled=datastore.enabled,
        workspace=workspace_to_rest_workspace(datastore.workspace),
        connection_parameters=RestConnectionParameters(
            entry=map_to_entries(datastore.connection_parameters)
        ),
        href=datastore.href or None,
    )


def rest_datastore_to_datastore(rest_datastore: RestDatastore) -> Datastore:
    return Datastore(
        name=rest_datastore.name,
        description=rest_datastore.description or "",
        type=rest_datastore.type or "",
        enabled=bool(rest_datastore.enabled),
        workspace=rest_workspace_to_workspace(rest_datastore.workspace),
        connection_parameters=entries_to_map(rest_datastore.connection_parameters),
        href=rest_datastore.href or "",
    )


def get_datastores_rest_response_to_response(response: GetDatastoresRestResponse) -> GetDatastoresResponse:
    if response.data_stores is None:
        return GetDatastoresResponse()
    return GetDatastoresResponse(
        datastores=[rest_datastore_to_datastore(d) for d in response.data_stores.data_store]
    )


# ============================================================================
# Feature types
# ============================================================================

class RestBoundingBox(RestModel):
    minx: float
    maxx: float
    miny: float
    maxy: float
    crs: Optional[str] = None


class RestNamespace(RestModel):
    """A feature type's namespace, named after its workspace."""
    name: str


class RestStore(RestModel):
    store_class: str = Field(default=DATASTORE_CLASS, alias="@class")
    name: str


class RestAttribute(RestModel):
    name: str
    min_occurs: int = Field(default=0, alias="minOccurs")
    max_occurs: int = Field(default=1, alias="maxOccurs")
    nillable: bool = True
    binding: str


class RestAttributes(RestModel):
    attribute: List[RestAttribute] = Field(default_factory=list)


class RestFeatureType(RestModel):
    name: str
    href: Optional[str] = None
    native_name: Optional[str] = Field(default=None, alias="nativeName")
    namespace: Optional[RestNamespace] = None
    title: Optional[str] = None
    abstract: Optional[str] = None
    native_crs: Optional[str] = Field(default=None, alias="nativeCRS")
    srs: Optional[str] = None
    native_bounding_box: Optional[RestBoundingBox] = Field(default=None, alias="nativeBoundingBox")
    lat_lon_bounding_box: Optional[RestBoundingBox] = Field(default=None, alias="latLonBoundingBox")
    projection_policy: Optional[str] = Field(default=None, alias="projectionPolicy")
    attributes: Optional[RestAttributes] = None
    enabled: Optional[bool] = None
    store: Optional[RestStore] = None


class RestFeatureTypes(RestModel):
    feature_type: List[RestFeatureType] = Field(default_factory=list, alias="featureType")


class CreateFeatureTypeRestRequest(RestModel):
    feature_type: RestFeatureType = Field(alias="featureType")


class GetFeatureTypesRestResponse(RestModel):
    feature_types: Optional[RestFeatureTypes] = Field(default=None, alias="featureTypes")


def new_store(workspace: str, datastore: str) -> RestStore:
    """GeoServer references the store as "<workspace>:<datastore>"."""
    return RestStore(store_class=DATASTORE_CLASS, name=f"{workspace}:{datastore}")


def bounding_box_to_rest_bounding_box(bounding_box: Optional[BoundingBox]) -> Optional[RestBoundingBox]:
    if bounding_box is None:
        return None
    return RestBoundingBox(
        minx=bounding_box.min_x,
        maxx=bounding_box.max_x,
        miny=bounding_box.min_y,
        maxy=bounding_box.max_y,
        crs=bounding_box.crs,
    )


def default_attributes() -> RestAttributes:
    """Single nillable point geometry attribute."""
    return RestAttributes(attribute=[
        RestAttribute(
            name="Geometry",
            min_occurs=0,
            max_occurs=1,
            nillable=True,
            binding=DEFAULT_GEOMETRY_BINDING,
        )
    ])


def new_create_feature_type_rest_request(request: CreateFeatureTypeRequest) -> CreateFeatureTypeRestRequest:
    native_bounding_box = bounding_box_to_rest_bounding_box(request.native_bounding_box)
    lat_lon_bounding_box = bounding_box_to_rest_bounding_box(
        request.lat_long_bounding_box or request.native_bounding_box
    )

    return CreateFeatureTypeRestRequest(
        feature_type=RestFeatureType(
            name=request.name,
            native_name=request.native_name,
            namespace=RestNamespace(name=request.workspace),
            title=request.title,
            abstract=request.abstract,
            native_crs=request.native_crs or None,
            srs=request.srs,
            native_bounding_box=native_bounding_box,
            lat_lon_bounding_box=lat_lon_bounding_box,
            projection_policy=DEFAULT_PROJECTION_POLICY,
            attributes=default_attributes(),
            enabled=True,
            store=new_store(request.workspace, request.datastore),
        )
    )


def feature_type_to_rest_feature_type(feature_type: FeatureType) -> RestFeatureType:
    return RestFeatureType(name=feature_type.name, href=feature_type.href or None)


def rest_feature_type_to_feature_type(rest_feature_type: RestFeatureType) -> FeatureType:
    return FeatureType(name=rest_feature_type.name, href=rest_feature_type.href or "")


def get_feature_types_rest_response_to_response(response: GetFeatureTypesRestResponse) -> GetFeatureTypesResponse:
    if response.feature_types is None:
        return GetFeatureTypesResponse()
    return GetFeatureTypesResponse(
        feature_types=[rest_feature_type_to_feature_type(f) for f in response.feature_types.feature_type]
    )

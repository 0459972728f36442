# ============================================================================
# CLAUDE CONTEXT - GEOSERVER REST CLIENT
# ============================================================================
# STATUS: Service Layer - GeoServer administrative REST client
# PURPOSE: Workspace, datastore and feature type lifecycle plus health check
# EXPORTS: RestGeoserverClient
# DEPENDENCIES: httpx (sync), pydantic, geoserver_client.util_logger
# PORTABLE: Yes - no config imports required, base_url/credentials are constructor params
# INDEX: Health:189, Workspaces:218, Datastores:320, Feature types:446, Plumbing:561
# ============================================================================
"""
GeoServer REST Client (SYNC).

One method per lifecycle action against the GeoServer REST API:
- Health: /rest/about/status
- Workspaces: /rest/workspaces
- Datastores: /rest/workspaces/{ws}/datastores
- Feature types: /rest/workspaces/{ws}/datastores/{ds}/featuretypes

Every call is a single blocking request over the injected httpx.Client.
There are no retries and no caching; every read goes to the server.

Identifiers are interpolated into the URL as given. Callers must pass
URL-safe names.

Status handling:
- Existence checks: 200 -> True, anything else -> False
- Lists: 200 -> parsed body, anything else -> GeoServerRequestError.
  GeoServer returns {"workspaces": ""} style bodies for empty collections;
  any body that fails to parse is logged and treated as an empty list.
- Create: 201 only
- Delete workspace/datastore: 200 only
- Delete feature type: 200 or 404
- Transport failures always raise GeoServerConnectionError
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .util_logger import LoggerFactory, ComponentType, LogContext
from .config import GeoServerClientConfig, get_geoserver_config
from .exceptions import GeoServerConnectionError, GeoServerRequestError
from .models import (
    CreateDatastoreRequest,
    CreateFeatureTypeRequest,
    CreateWorkspaceRequest,
    Datastore,
    GetDatastoresResponse,
    GetFeatureTypesResponse,
    GetWorkspacesResponse,
    Workspace,
)
from .rest_models import (
    GetDatastoreRestResponse,
    GetDatastoresRestResponse,
    GetFeatureTypesRestResponse,
    GetWorkspaceRestResponse,
    GetWorkspacesRestResponse,
    RestModel,
    get_datastores_rest_response_to_response,
    get_feature_types_rest_response_to_response,
    get_workspaces_rest_response_to_response,
    new_create_datastore_rest_request,
    new_create_feature_type_rest_request,
    new_create_workspace_rest_request,
    rest_datastore_to_datastore,
    rest_workspace_to_workspace,
)

APPLICATION_JSON = "application/json"

JSON_HEADERS = {
    "Content-Type": APPLICATION_JSON,
    "Accept": APPLICATION_JSON,
}

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_NOT_FOUND = 404

default_logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "RestGeoserverClient")


class RestGeoserverClient:
    """
    Sync client for the GeoServer administrative REST API.

    The client holds no mutable state after construction, so one instance
    can be shared between threads. Connection pooling and timeouts belong
    to the httpx.Client it is given.

    Usage:
        # Option 1: Explicit connection details
        client = RestGeoserverClient(
            base_url="http://localhost:8080/geoserver",
            username="admin",
            password="geoserver"
        )

        # Option 2: From GEOSERVER_* environment variables
        client = RestGeoserverClient.from_config()

        client.create_workspace(CreateWorkspaceRequest("transport"))
        if client.workspace_exists("transport"):
            ...

        # Always close when done (or use as a context manager)
        client.close()
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
        timeout: float = 30.0,
        correlation_id: Optional[str] = None
    ):
        """
        Initialize GeoServer client.

        Args:
            base_url: GeoServer URL including context path, e.g. "http://host:8080/geoserver"
            username: Admin username for HTTP Basic auth
            password: Admin password for HTTP Basic auth
            http_client: Transport to use. When omitted the client creates (and owns) one.
            logger: Logger receiving key-value diagnostics in extra['custom_dimensions']
            timeout: Timeout in seconds, only used when http_client is omitted
            correlation_id: Optional ID added to every event this client logs
        """
        self._base_url = base_url.rstrip('/')
        self._username = username
        self._auth = httpx.BasicAuth(username, password)
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=httpx.Timeout(timeout))
        self._http_client = http_client
        self._logger = logger or default_logger
        self._log_context = LogContext(geoserver_url=self._base_url, correlation_id=correlation_id)

    @classmethod
    def from_config(
        cls,
        config: Optional[GeoServerClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
        correlation_id: Optional[str] = None
    ) -> "RestGeoserverClient":
        """Create a client from GeoServerClientConfig (GEOSERVER_* env vars by default)."""
        config = config or get_geoserver_config()
        return cls(
            base_url=config.base_url,
            username=config.username,
            password=config.password,
            http_client=http_client,
            logger=logger,
            timeout=config.timeout_seconds,
            correlation_id=correlation_id
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def username(self) -> str:
        return self._username

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and not self._http_client.is_closed:
            self._http_client.close()

    def __enter__(self) -> "RestGeoserverClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self) -> str:
        return f"RestGeoserverClient(base_url={self._base_url!r}, username={self._username!r})"

    # =========================================================================
    # Health Check
    # =========================================================================

    def is_health_ok(self) -> bool:
        """
        Check GeoServer is up.

        Returns:
            True when /rest/about/status answers 200, False otherwise.

        Raises:
            GeoServerConnectionError: GeoServer could not be reached.
        """
        url = self._url("/rest/about/status")
        self._log(logging.DEBUG, "Querying Geoserver to see if healthy", url=url)

        response = self._send("GET", url)
        if response.status_code == HTTP_OK:
            return True

        self._log(
            logging.DEBUG,
            "Geoserver responded with a non-200 HTTP status code",
            url=url,
            status=response.status_code
        )
        return False

    # =========================================================================
    # Workspaces
    # =========================================================================

    def workspace_exists(self, workspace: str) -> bool:
        """True when the workspace exists. Only transport failures raise."""
        self._require(workspace=workspace)
        url = self._url(f"/rest/workspaces/{workspace}")
        return self._exists(url, "Querying Geoserver for specific workspace", workspace=workspace)

    def get_workspace(self, workspace: str) -> Optional[Workspace]:
        """
        Get a single workspace.

        Returns:
            The workspace, or None when GeoServer does not answer 200.
        """
        self._require(workspace=workspace)
        url = self._url(f"/rest/workspaces/{workspace}")
        self._log(logging.DEBUG, "Querying Geoserver for specific workspace", url=url, workspace=workspace)

        response = self._send("GET", url)
        if response.status_code != HTTP_OK:
            self._log_unexpected_status(url, response, "Workspace not returned by Geoserver", workspace=workspace)
            return None

        try:
            rest_response = GetWorkspaceRestResponse.model_validate_json(response.text)
        except ValidationError:
            self._log_invalid_response(url, response, workspace=workspace)
            return Workspace(name=workspace)

        return rest_workspace_to_workspace(rest_response.workspace)

    def get_workspaces(self) -> GetWorkspacesResponse:
        """
        Get all workspaces.

        Raises:
            GeoServerRequestError: GeoServer answered with a non-200 status.
            GeoServerConnectionError: GeoServer could not be reached.
        """
        url = self._url("/rest/workspaces")
        self._log(logging.DEBUG, "Querying Geoserver for workspaces", url=url)

        response = self._send("GET", url)
        self._expect_status(
            url, response, (HTTP_OK,),
            "unable to query Geoserver for workspaces"
        )

        self._log_response_body(url, response, "Geoserver returned workspaces")
        try:
            rest_response = GetWorkspacesRestResponse.model_validate_json(response.text)
        except ValidationError:
            # Geoserver returns {"workspaces": ""} when there are none
            self._log_invalid_response(url, response)
            return GetWorkspacesResponse()

        return get_workspaces_rest_response_to_response(rest_response)

    def create_workspace(self, request: CreateWorkspaceRequest):
        """
        Create a workspace.

        Raises:
            GeoServerRequestError: GeoServer did not answer 201.
        """
        self._require(workspace=request.workspace)
        url = self._url("/rest/workspaces.json")
        rest_request = new_create_workspace_rest_request(request)

        response = self._send_json(
            "POST", url, rest_request, "Creating a Geoserver workspace",
            workspace=request.workspace
        )
        self._expect_status(
            url, response, (HTTP_CREATED,),
            f"unable to create workspace '{request.workspace}'",
            workspace=request.workspace
        )
        self._log(logging.INFO, "Workspace created successfully", url=url, workspace=request.workspace)

    def delete_workspace(self, workspace: str):
        """
        Delete a workspace and everything in it.

        Raises:
            GeoServerRequestError: GeoServer did not answer 200 (including 404).
        """
        self._require(workspace=workspace)
        url = self._url(f"/rest/workspaces/{workspace}?recurse=true")
        self._log(logging.DEBUG, "Deleting Geoserver workspace", url=url, workspace=workspace)

        response = self._send("DELETE", url)
        self._expect_status(
            url, response, (HTTP_OK,),
            f"unable to delete workspace '{workspace}'",
            workspace=workspace
        )
        self._log(logging.INFO, "Workspace deleted successfully", url=url, workspace=workspace)

    # =========================================================================
    # Datastores
    # =========================================================================

    def datastore_exists(self, workspace: str, datastore: str) -> bool:
        """True when the datastore exists in the workspace. Only transport failures raise."""
        self._require(workspace=workspace, datastore=datastore)
        url = self._url(f"/rest/workspaces/{workspace}/datastores/{datastore}.json")
        return self._exists(
            url, "Querying Geoserver for specific datastore",
            workspace=workspace, datastore=datastore
        )

    def get_datastore(self, workspace: str, datastore: str) -> Optional[Datastore]:
        """
        Get a single datastore including its connection parameters.

        Returns:
            The datastore, or None when GeoServer does not answer 200.
        """
        self._require(workspace=workspace, datastore=datastore)
        url = self._url(f"/rest/workspaces/{workspace}/datastores/{datastore}.json")
        self._log(
            logging.DEBUG, "Querying Geoserver for specific datastore",
            url=url, workspace=workspace, datastore=datastore
        )

        response = self._send("GET", url)
        if response.status_code != HTTP_OK:
            self._log_unexpected_status(
                url, response, "Datastore not returned by Geoserver",
                workspace=workspace, datastore=datastore
            )
            return None

        try:
            rest_response = GetDatastoreRestResponse.model_validate_json(response.text)
        except ValidationError:
            self._log_invalid_response(url, response, workspace=workspace, datastore=datastore)
            return Datastore(name=datastore, workspace=Workspace(name=workspace))

        return rest_datastore_to_datastore(rest_response.data_store)

    def get_datastores(self, workspace: str) -> GetDatastoresResponse:
        """
        Get the datastores of a workspace.

        List entries only carry name and href; use get_datastore() for the rest.

        Raises:
            GeoServerRequestError: GeoServer answered with a non-200 status.
        """
        self._require(workspace=workspace)
        url = self._url(f"/rest/workspaces/{workspace}/datastores.json")
        self._log(logging.DEBUG, "Querying Geoserver for datastores", url=url, workspace=workspace)

        response = self._send("GET", url)
        self._expect_status(
            url, response, (HTTP_OK,),
            f"unable to query Geoserver for datastores in workspace '{workspace}'",
            workspace=workspace
        )

        self._log_response_body(url, response, "Geoserver returned datastores", workspace=workspace)
        try:
            rest_response = GetDatastoresRestResponse.model_validate_json(response.text)
        except ValidationError:
            self._log_invalid_response(url, response, workspace=workspace)
            return GetDatastoresResponse()

        return get_datastores_rest_response_to_response(rest_response)

    def create_datastore(self, request: CreateDatastoreRequest):
        """
        Create a datastore in the request's workspace.

        Raises:
            ValueError: A required field is empty or connection_details is missing.
            GeoServerRequestError: GeoServer did not answer 201.
        """
        self._require(name=request.name, type=request.type, workspace=request.workspace)
        if request.connection_details is None:
            raise ValueError("connection_details is required")

        url = self._url(f"/rest/workspaces/{request.workspace}/datastores")
        rest_request = new_create_datastore_rest_request(request)

        response = self._send_json(
            "POST", url, rest_request, "Creating a Geoserver datastore",
            workspace=request.workspace, datastore=request.name
        )
        self._expect_status(
            url, response, (HTTP_CREATED,),
            f"unable to create datastore '{request.name}'",
            workspace=request.workspace, datastore=request.name
        )
        self._log(
            logging.INFO, "Datastore created successfully",
            url=url, workspace=request.workspace, datastore=request.name
        )

    def delete_datastore(self, workspace: str, datastore: str):
        """
        Delete a datastore and its feature types.

        Raises:
            GeoServerRequestError: GeoServer did not answer 200 (including 404).
        """
        self._require(workspace=workspace, datastore=datastore)
        url = self._url(f"/rest/workspaces/{workspace}/{datastore}?recurse=true")
        self._log(
            logging.DEBUG, "Deleting Geoserver datastore",
            url=url, workspace=workspace, datastore=datastore
        )

        response = self._send("DELETE", url)
        self._expect_status(
            url, response, (HTTP_OK,),
            f"unable to delete datastore '{datastore}' in workspace '{workspace}'",
            workspace=workspace, datastore=datastore
        )
        self._log(
            logging.INFO, "Datastore deleted successfully",
            url=url, workspace=workspace, datastore=datastore
        )

    # =========================================================================
    # Feature types
    # =========================================================================

    def feature_type_exists(self, workspace: str, datastore: str, feature_type: str) -> bool:
        """True when the feature type exists. Only transport failures raise."""
        self._require(workspace=workspace, datastore=datastore, feature_type=feature_type)
        url = self._url(
            f"/rest/workspaces/{workspace}/datastores/{datastore}/featuretypes/{feature_type}.json"
        )
        return self._exists(
            url, "Querying Geoserver for specific feature type",
            workspace=workspace, datastore=datastore, feature_type=feature_type
        )

    def get_feature_types(self, workspace: str, datastore: str) -> GetFeatureTypesResponse:
        """
        Get the feature types published from a datastore.

        Raises:
            GeoServerRequestError: GeoServer answered with a non-200 status.
        """
        self._require(workspace=workspace, datastore=datastore)
        url = self._url(f"/rest/workspaces/{workspace}/datastores/{datastore}/featuretypes.json")
        self._log(
            logging.DEBUG, "Querying Geoserver for feature types",
            url=url, workspace=workspace, datastore=datastore
        )

        response = self._send("GET", url)
        self._expect_status(
            url, response, (HTTP_OK,),
            f"unable to query Geoserver for feature types in datastore '{datastore}' "
            f"and workspace '{workspace}'",
            workspace=workspace, datastore=datastore
        )

        self._log_response_body(
            url, response, "Geoserver returned feature types",
            workspace=workspace, datastore=datastore
        )
        try:
            rest_response = GetFeatureTypesRestResponse.model_validate_json(response.text)
        except ValidationError:
            self._log_invalid_response(url, response, workspace=workspace, datastore=datastore)
            return GetFeatureTypesResponse()

        return get_feature_types_rest_response_to_response(rest_response)

    def create_feature_type(self, request: CreateFeatureTypeRequest):
        """
        Publish a table of a datastore as a feature type (layer).

        Raises:
            ValueError: A required field is empty or the bounding box is missing.
            GeoServerRequestError: GeoServer did not answer 201.
        """
        self._require(
            name=request.name,
            native_name=request.native_name,
            datastore=request.datastore,
            workspace=request.workspace,
            srs=request.srs
        )
        if request.native_bounding_box is None:
            raise ValueError("native_bounding_box is required")

        url = self._url(
            f"/rest/workspaces/{request.workspace}/datastores/{request.datastore}/featuretypes.json"
        )
        rest_request = new_create_feature_type_rest_request(request)

        response = self._send_json(
            "POST", url, rest_request, "Creating a Geoserver feature type",
            workspace=request.workspace, datastore=request.datastore, feature_type=request.name
        )
        self._expect_status(
            url, response, (HTTP_CREATED,),
            f"unable to create feature type '{request.name}'",
            workspace=request.workspace, datastore=request.datastore, feature_type=request.name
        )
        self._log(
            logging.INFO, "Feature type created successfully",
            url=url, workspace=request.workspace, datastore=request.datastore, feature_type=request.name
        )

    def delete_feature_type(self, workspace: str, datastore: str, feature_type: str):
        """
        Delete a feature type. Deleting one that does not exist (404) succeeds.

        Raises:
            GeoServerRequestError: GeoServer answered anything but 200 or 404.
        """
        self._require(workspace=workspace, datastore=datastore, feature_type=feature_type)
        url = self._url(
            f"/rest/workspaces/{workspace}/datastores/{datastore}/featuretypes/{feature_type}.json?recurse=true"
        )
        self._log(
            logging.DEBUG, "Deleting a Geoserver feature type",
            url=url, workspace=workspace, datastore=datastore, feature_type=feature_type
        )

        response = self._send("DELETE", url)
        self._expect_status(
            url, response, (HTTP_OK, HTTP_NOT_FOUND),
            f"unable to delete feature type '{feature_type}' in datastore '{datastore}' "
            f"and workspace '{workspace}'",
            workspace=workspace, datastore=datastore, feature_type=feature_type
        )
        self._log(
            logging.INFO, "Feature type deleted successfully",
            url=url, workspace=workspace, datastore=datastore, feature_type=feature_type,
            status=response.status_code
        )

    # =========================================================================
    # Plumbing
    # =========================================================================

    def _url(self, path: str) -> str:
        return self._base_url + path

    @staticmethod
    def _require(**values: str):
        for name, value in values.items():
            if not value:
                raise ValueError(f"{name} must not be empty")

    def _log(self, level: int, message: str, **fields):
        self._logger.log(level, message, extra={'custom_dimensions': {**self._log_context.to_dict(), **fields}})

    def _send(self, method: str, url: str, content: Optional[str] = None) -> httpx.Response:
        """
        Issue one authenticated JSON request.

        Raises:
            GeoServerConnectionError: The transport failed.
        """
        try:
            return self._http_client.request(
                method,
                url,
                content=content,
                headers=JSON_HEADERS,
                auth=self._auth
            )
        except httpx.RequestError as e:
            self._log(
                logging.DEBUG,
                "Could not communicate with Geoserver",
                url=url,
                method=method,
                error=str(e)
            )
            raise GeoServerConnectionError(
                f"could not communicate with Geoserver: {e}", url=url
            ) from e

    def _send_json(self, method: str, url: str, body: RestModel, message: str, **fields) -> httpx.Response:
        request_json = body.to_json()
        self._log(logging.DEBUG, message, url=url, request=request_json, **fields)
        return self._send(method, url, content=request_json)

    def _exists(self, url: str, message: str, **fields) -> bool:
        self._log(logging.DEBUG, message, url=url, **fields)

        response = self._send("GET", url)
        if response.status_code == HTTP_OK:
            return True

        self._log_unexpected_status(url, response, "Geoserver returned a non-200 HTTP status code", **fields)
        return False

    def _expect_status(self, url: str, response: httpx.Response, accepted: tuple, error_message: str, **fields):
        """Raise GeoServerRequestError (after logging the body) unless the status is accepted."""
        if response.status_code in accepted:
            return

        self._log(
            logging.WARNING,
            error_message,
            url=url,
            response_status=response.status_code,
            response_body=response.text,
            **fields
        )
        raise GeoServerRequestError(error_message, status_code=response.status_code, url=url)

    def _log_unexpected_status(self, url: str, response: httpx.Response, message: str, **fields):
        self._log(logging.DEBUG, message, url=url, response_status=response.status_code, **fields)

    def _log_response_body(self, url: str, response: httpx.Response, message: str, **fields):
        self._log(
            logging.DEBUG,
            message,
            url=url,
            response_status=response.status_code,
            response_body=response.text,
            **fields
        )

    def _log_invalid_response(self, url: str, response: httpx.Response, **fields):
        self._log(
            logging.WARNING,
            "Geoserver returned an invalid response",
            url=url,
            response_status=response.status_code,
            response_body=response.text,
            **fields
        )

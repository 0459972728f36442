"""
RestGeoserverClient behaviour against a stubbed GeoServer.

Covers URL construction, headers/auth, status code branching, the
empty-collection quirk and transport failure propagation.
"""

import base64
import logging

import httpx
import pytest

from geoserver_client import (
    BoundingBox,
    CreateDatastoreRequest,
    CreateFeatureTypeRequest,
    CreateWorkspaceRequest,
    Datastore,
    GeoServerClientConfig,
    GeoServerConnectionError,
    GeoServerRequestError,
    PostgisConnectionDetails,
    POSTGIS_TUNING_DEFAULTS,
    RestGeoserverClient,
    Workspace,
)

REST = "/geoserver/rest"


def postgis_details():
    return PostgisConnectionDetails(
        host="postgis",
        port=5432,
        username="postgres",
        password="postgres",
        database="gis",
        schema="public"
    )


def world_bbox():
    return BoundingBox(min_x=-180, max_x=180, min_y=-90, max_y=90, crs="EPSG:4326")


def custom_dimensions(caplog, message):
    return [r.custom_dimensions for r in caplog.records if r.getMessage() == message]


class TestRequestConstruction:
    def test_sends_json_headers(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/about/status")
        geoserver_client.is_health_ok()

        headers = stub_geoserver.last_request.headers
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"

    def test_sends_basic_auth(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces")
        geoserver_client.get_workspaces()

        expected = base64.b64encode(b"admin:geoserver").decode()
        assert stub_geoserver.last_request.headers["Authorization"] == f"Basic {expected}"

    def test_trailing_slash_on_base_url_is_ignored(self, stub_geoserver, client_logger):
        stub_geoserver.add("GET", f"{REST}/about/status")
        http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))
        client = RestGeoserverClient(
            "http://geoserver.test/geoserver/", "admin", "geoserver",
            http_client=http_client, logger=client_logger
        )

        assert client.base_url == "http://geoserver.test/geoserver"
        assert client.is_health_ok() is True
        assert stub_geoserver.last_request.url.path == f"{REST}/about/status"

    @pytest.mark.parametrize("call", [
        lambda c: c.workspace_exists(""),
        lambda c: c.delete_workspace(""),
        lambda c: c.create_workspace(CreateWorkspaceRequest("")),
        lambda c: c.datastore_exists("ws", ""),
        lambda c: c.get_datastores(""),
        lambda c: c.delete_datastore("", "ds"),
        lambda c: c.feature_type_exists("ws", "ds", ""),
        lambda c: c.get_feature_types("ws", ""),
        lambda c: c.delete_feature_type("", "ds", "ft"),
    ])
    def test_empty_identifiers_are_rejected_before_sending(self, geoserver_client, stub_geoserver, call):
        with pytest.raises(ValueError):
            call(geoserver_client)
        assert stub_geoserver.requests == []


class TestHealth:
    def test_healthy_on_200(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/about/status", json_body={"about": {}})
        assert geoserver_client.is_health_ok() is True

    def test_unhealthy_on_other_status(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/about/status", status_code=503)
        assert geoserver_client.is_health_ok() is False

    def test_transport_failure_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/about/status", raises=httpx.ConnectError)

        with pytest.raises(GeoServerConnectionError) as exc_info:
            geoserver_client.is_health_ok()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.url.endswith("/rest/about/status")


class TestWorkspaces:
    def test_workspace_exists_on_200(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/iexist", json_body={"workspace": {"name": "iexist"}})
        assert geoserver_client.workspace_exists("iexist") is True

    def test_workspace_does_not_exist_on_404(self, geoserver_client):
        assert geoserver_client.workspace_exists("idontexist") is False

    def test_workspace_exists_propagates_transport_failure(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/iexist", raises=httpx.ReadTimeout)
        with pytest.raises(GeoServerConnectionError):
            geoserver_client.workspace_exists("iexist")

    def test_get_workspace(self, geoserver_client, stub_geoserver):
        stub_geoserver.add(
            "GET", f"{REST}/workspaces/iexist",
            json_body={"workspace": {"name": "iexist", "isolated": False}}
        )
        workspace = geoserver_client.get_workspace("iexist")
        assert workspace.name == "iexist"

    def test_get_missing_workspace_returns_none(self, geoserver_client):
        assert geoserver_client.get_workspace("idontexist") is None

    def test_get_workspace_unparseable_body_is_a_bare_workspace(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/iexist", text="<html>not json</html>")
        assert geoserver_client.get_workspace("iexist") == Workspace(name="iexist")

    def test_get_workspaces(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces", json_body={
            "workspaces": {"workspace": [
                {"name": "testdatastore", "href": "http://geoserver.test/geoserver/rest/workspaces/testdatastore.json"}
            ]}
        })

        response = geoserver_client.get_workspaces()

        assert response.names == ["testdatastore"]
        assert response.workspaces[0].href.endswith("testdatastore.json")

    def test_empty_string_collection_is_an_empty_list(self, geoserver_client, stub_geoserver, caplog):
        stub_geoserver.add("GET", f"{REST}/workspaces", json_body={"workspaces": ""})

        with caplog.at_level(logging.DEBUG, logger="tests.geoserver_client"):
            response = geoserver_client.get_workspaces()

        assert response.workspaces == []
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].getMessage() == "Geoserver returned an invalid response"
        assert '"workspaces"' in warnings[0].custom_dimensions["response_body"]

    def test_unparseable_body_is_an_empty_list(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces", text="<html>not json</html>")
        assert geoserver_client.get_workspaces().workspaces == []

    def test_get_workspaces_non_200_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces", status_code=500, text="boom")

        with pytest.raises(GeoServerRequestError) as exc_info:
            geoserver_client.get_workspaces()

        assert exc_info.value.status_code == 500

    def test_create_workspace(self, geoserver_client, stub_geoserver, caplog):
        stub_geoserver.add("POST", f"{REST}/workspaces.json", status_code=201)

        with caplog.at_level(logging.DEBUG, logger="tests.geoserver_client"):
            geoserver_client.create_workspace(CreateWorkspaceRequest("testdatastore"))

        assert stub_geoserver.last_request.method == "POST"
        assert stub_geoserver.last_json() == {"workspace": {"name": "testdatastore"}}
        logged = custom_dimensions(caplog, "Creating a Geoserver workspace")
        assert logged[0]["request"] == '{"workspace":{"name":"testdatastore"}}'

    def test_create_workspace_failure_names_the_workspace(self, geoserver_client, stub_geoserver, caplog):
        stub_geoserver.add("POST", f"{REST}/workspaces.json", status_code=409, text="already exists")

        with caplog.at_level(logging.DEBUG, logger="tests.geoserver_client"):
            with pytest.raises(GeoServerRequestError) as exc_info:
                geoserver_client.create_workspace(CreateWorkspaceRequest("dupe"))

        assert str(exc_info.value) == "unable to create workspace 'dupe'"
        assert exc_info.value.status_code == 409
        logged = custom_dimensions(caplog, "unable to create workspace 'dupe'")
        assert logged[0]["response_body"] == "already exists"

    def test_delete_workspace_is_recursive(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("DELETE", f"{REST}/workspaces/iexist?recurse=true")

        geoserver_client.delete_workspace("iexist")

        request = stub_geoserver.last_request
        assert request.method == "DELETE"
        assert request.url.params["recurse"] == "true"

    def test_delete_missing_workspace_raises(self, geoserver_client):
        with pytest.raises(GeoServerRequestError) as exc_info:
            geoserver_client.delete_workspace("idontexist")

        assert exc_info.value.status_code == 404
        assert "idontexist" in str(exc_info.value)


class TestDatastores:
    def test_datastore_exists(self, geoserver_client, stub_geoserver):
        stub_geoserver.add(
            "GET", f"{REST}/workspaces/d41d8cd98/datastores/f00b204e98.json",
            json_body={"dataStore": {"name": "f00b204e98"}}
        )
        assert geoserver_client.datastore_exists("d41d8cd98", "f00b204e98") is True
        assert geoserver_client.datastore_exists("d41d8cd98", "missing") is False

    def test_create_datastore_body(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("POST", f"{REST}/workspaces/d41d8cd98/datastores", status_code=201)

        geoserver_client.create_datastore(CreateDatastoreRequest(
            name="f00b204e98",
            description="00998ecf8427e",
            type="postgres",
            workspace="d41d8cd98",
            connection_details=postgis_details()
        ))

        body = stub_geoserver.last_json()["dataStore"]
        assert body["name"] == "f00b204e98"
        assert body["description"] == "00998ecf8427e"
        assert body["type"] == "postgres"
        assert body["enabled"] is True
        assert body["workspace"] == {"name": "d41d8cd98"}

        entries = {e["@key"]: e["$"] for e in body["connectionParameters"]["entry"]}
        assert entries == postgis_details().entries()

    def test_create_datastore_requires_connection_details(self, geoserver_client, stub_geoserver):
        with pytest.raises(ValueError):
            geoserver_client.create_datastore(CreateDatastoreRequest(
                name="ds", type="postgres", workspace="ws", connection_details=None
            ))
        assert stub_geoserver.requests == []

    def test_create_datastore_failure_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("POST", f"{REST}/workspaces/ws/datastores", status_code=500)

        with pytest.raises(GeoServerRequestError, match="unable to create datastore 'ds'"):
            geoserver_client.create_datastore(CreateDatastoreRequest(
                name="ds", type="postgres", workspace="ws", connection_details=postgis_details()
            ))

    def test_get_datastore_returns_connection_parameters(self, geoserver_client, stub_geoserver):
        supplied = postgis_details().entries()
        stub_geoserver.add("GET", f"{REST}/workspaces/ws/datastores/ds.json", json_body={
            "dataStore": {
                "name": "ds",
                "description": "roads",
                "type": "PostGIS",
                "enabled": True,
                "workspace": {"name": "ws", "href": "http://geoserver.test/geoserver/rest/workspaces/ws.json"},
                "connectionParameters": {
                    "entry": [{"@key": k, "$": v} for k, v in supplied.items()]
                },
                "_default": False,
                "featureTypes": "http://geoserver.test/geoserver/rest/workspaces/ws/datastores/ds/featuretypes.json"
            }
        })

        datastore = geoserver_client.get_datastore("ws", "ds")

        assert datastore.name == "ds"
        assert datastore.enabled is True
        assert datastore.workspace.name == "ws"
        assert datastore.connection_parameters == supplied
        for key, value in POSTGIS_TUNING_DEFAULTS.items():
            assert datastore.connection_parameters[key] == value

    def test_get_missing_datastore_returns_none(self, geoserver_client):
        assert geoserver_client.get_datastore("ws", "missing") is None

    def test_get_datastore_unparseable_body_is_a_bare_datastore(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/ws/datastores/ds.json", text="<html>not json</html>")
        assert geoserver_client.get_datastore("ws", "ds") == Datastore(name="ds", workspace=Workspace(name="ws"))

    def test_get_datastores(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/ws/datastores.json", json_body={
            "dataStores": {"dataStore": [
                {"name": "roads", "href": "http://geoserver.test/geoserver/rest/workspaces/ws/datastores/roads.json"},
                {"name": "rivers", "href": "http://geoserver.test/geoserver/rest/workspaces/ws/datastores/rivers.json"}
            ]}
        })

        response = geoserver_client.get_datastores("ws")

        assert response.names == ["roads", "rivers"]

    def test_get_datastores_empty_string_quirk(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/ws/datastores.json", json_body={"dataStores": ""})
        assert geoserver_client.get_datastores("ws").datastores == []

    def test_get_datastores_unparseable_body_is_an_empty_list(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{REST}/workspaces/ws/datastores.json", text="<html>not json</html>")
        assert geoserver_client.get_datastores("ws").datastores == []

    def test_get_datastores_non_200_raises(self, geoserver_client):
        with pytest.raises(GeoServerRequestError):
            geoserver_client.get_datastores("missing")

    def test_delete_datastore_path(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("DELETE", f"{REST}/workspaces/ws/ds?recurse=true")

        geoserver_client.delete_datastore("ws", "ds")

        assert stub_geoserver.last_request.url.path == f"{REST}/workspaces/ws/ds"

    def test_delete_datastore_404_is_an_error(self, geoserver_client):
        with pytest.raises(GeoServerRequestError) as exc_info:
            geoserver_client.delete_datastore("ws", "missing")
        assert exc_info.value.status_code == 404


class TestFeatureTypes:
    FT_PATH = f"{REST}/workspaces/d41d8cd98/datastores/f00b204e98/featuretypes"

    def create_request(self, **overrides):
        values = dict(
            name="g78ndqh356",
            native_name="g78ndqh356",
            title="g78ndqh356",
            abstract="A data layer created by an integration test",
            srs="EPSG:4326",
            native_bounding_box=world_bbox(),
            datastore="f00b204e98",
            workspace="d41d8cd98"
        )
        values.update(overrides)
        return CreateFeatureTypeRequest(**values)

    def test_feature_type_exists(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{self.FT_PATH}/g78ndqh356.json", json_body={"featureType": {"name": "g78ndqh356"}})
        assert geoserver_client.feature_type_exists("d41d8cd98", "f00b204e98", "g78ndqh356") is True
        assert geoserver_client.feature_type_exists("d41d8cd98", "f00b204e98", "missing") is False

    def test_create_feature_type_body(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("POST", f"{self.FT_PATH}.json", status_code=201)

        geoserver_client.create_feature_type(self.create_request())

        body = stub_geoserver.last_json()["featureType"]
        assert body["name"] == "g78ndqh356"
        assert body["nativeName"] == "g78ndqh356"
        assert body["namespace"] == {"name": "d41d8cd98"}
        assert body["srs"] == "EPSG:4326"
        assert body["store"] == {"@class": "dataStore", "name": "d41d8cd98:f00b204e98"}
        assert body["enabled"] is True
        assert body["projectionPolicy"] == "REPROJECT_TO_DECLARED"
        assert body["nativeBoundingBox"] == {
            "minx": -180.0, "maxx": 180.0, "miny": -90.0, "maxy": 90.0, "crs": "EPSG:4326"
        }
        assert body["latLonBoundingBox"] == body["nativeBoundingBox"]
        assert body["attributes"]["attribute"][0]["name"] == "Geometry"
        assert "nativeCRS" not in body

    def test_explicit_lat_long_bounding_box_is_sent(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("POST", f"{self.FT_PATH}.json", status_code=201)
        native = BoundingBox(min_x=0, max_x=1000, min_y=0, max_y=500, crs="EPSG:26910")

        geoserver_client.create_feature_type(self.create_request(
            native_bounding_box=native,
            lat_long_bounding_box=world_bbox(),
            native_crs="EPSG:26910"
        ))

        body = stub_geoserver.last_json()["featureType"]
        assert body["nativeBoundingBox"]["crs"] == "EPSG:26910"
        assert body["latLonBoundingBox"]["crs"] == "EPSG:4326"
        assert body["nativeCRS"] == "EPSG:26910"

    def test_create_feature_type_requires_srs_and_bbox(self, geoserver_client, stub_geoserver):
        with pytest.raises(ValueError):
            geoserver_client.create_feature_type(self.create_request(srs=""))
        with pytest.raises(ValueError):
            geoserver_client.create_feature_type(self.create_request(native_bounding_box=None))
        assert stub_geoserver.requests == []

    def test_create_feature_type_failure_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("POST", f"{self.FT_PATH}.json", status_code=400, text="bad bbox")
        with pytest.raises(GeoServerRequestError, match="g78ndqh356"):
            geoserver_client.create_feature_type(self.create_request())

    def test_get_feature_types(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{self.FT_PATH}.json", json_body={
            "featureTypes": {"featureType": [
                {"name": "g78ndqh356", "href": "http://geoserver.test/ft.json"}
            ]}
        })

        response = geoserver_client.get_feature_types("d41d8cd98", "f00b204e98")

        assert response.names == ["g78ndqh356"]
        assert response.feature_types[0].href == "http://geoserver.test/ft.json"

    def test_get_feature_types_empty_string_quirk(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{self.FT_PATH}.json", json_body={"featureTypes": ""})
        assert geoserver_client.get_feature_types("d41d8cd98", "f00b204e98").feature_types == []

    def test_get_feature_types_unparseable_body_is_an_empty_list(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{self.FT_PATH}.json", text="<html>not json</html>")
        assert geoserver_client.get_feature_types("d41d8cd98", "f00b204e98").feature_types == []

    def test_get_feature_types_non_200_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("GET", f"{self.FT_PATH}.json", status_code=500, text="boom")

        with pytest.raises(GeoServerRequestError) as exc_info:
            geoserver_client.get_feature_types("d41d8cd98", "f00b204e98")

        assert exc_info.value.status_code == 500

    @pytest.mark.parametrize("status_code", [200, 404])
    def test_delete_feature_type_accepts_200_and_404(self, geoserver_client, stub_geoserver, status_code):
        stub_geoserver.add("DELETE", f"{self.FT_PATH}/g78ndqh356.json?recurse=true", status_code=status_code)
        geoserver_client.delete_feature_type("d41d8cd98", "f00b204e98", "g78ndqh356")

    def test_delete_missing_feature_type_succeeds(self, geoserver_client):
        geoserver_client.delete_feature_type("d41d8cd98", "f00b204e98", "neverexisted")

    def test_delete_feature_type_other_status_raises(self, geoserver_client, stub_geoserver):
        stub_geoserver.add("DELETE", f"{self.FT_PATH}/g78ndqh356.json?recurse=true", status_code=500)
        with pytest.raises(GeoServerRequestError) as exc_info:
            geoserver_client.delete_feature_type("d41d8cd98", "f00b204e98", "g78ndqh356")
        assert exc_info.value.status_code == 500


class TestLifecycle:
    def test_from_config(self, stub_geoserver):
        stub_geoserver.add("GET", "/gs/rest/about/status")
        config = GeoServerClientConfig(base_url="http://geoserver.test/gs/", username="u", password="p")
        http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))

        client = RestGeoserverClient.from_config(config, http_client=http_client)

        assert client.base_url == "http://geoserver.test/gs"
        assert client.username == "u"
        assert client.is_health_ok() is True

    def test_injected_transport_is_not_closed(self, stub_geoserver):
        http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))

        with RestGeoserverClient("http://geoserver.test", "u", "p", http_client=http_client):
            pass

        assert http_client.is_closed is False
        http_client.close()

    def test_owned_transport_is_closed(self):
        client = RestGeoserverClient("http://geoserver.test", "u", "p")
        client.close()
        assert client._http_client.is_closed is True

    def test_many_clients_share_the_default_logger(self, stub_geoserver):
        stub_geoserver.add("POST", "/rest/workspaces.json", status_code=201)
        http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))

        clients = [
            RestGeoserverClient("http://geoserver.test", "u", "p", http_client=http_client)
            for _ in range(1500)
        ]
        clients[-1].create_workspace(CreateWorkspaceRequest("roads"))

        assert stub_geoserver.last_json() == {"workspace": {"name": "roads"}}
        http_client.close()

    def test_events_carry_server_and_correlation_id(self, stub_geoserver, client_logger, caplog):
        stub_geoserver.add("GET", "/rest/about/status")
        http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))
        client = RestGeoserverClient(
            "http://geoserver.test", "u", "p",
            http_client=http_client, logger=client_logger, correlation_id="batch-7"
        )

        with caplog.at_level(logging.DEBUG, logger="tests.geoserver_client"):
            client.is_health_ok()

        logged = custom_dimensions(caplog, "Querying Geoserver to see if healthy")[0]
        assert logged["geoserver_url"] == "http://geoserver.test"
        assert logged["correlation_id"] == "batch-7"
        http_client.close()

    def test_repr_hides_password(self):
        client = RestGeoserverClient("http://geoserver.test", "admin", "s3cret")
        assert "s3cret" not in repr(client)
        client.close()

"""
Root conftest.py: sys.path setup, config cache resets and the stub GeoServer transport.

Unit tests never touch the network: RestGeoserverClient is handed an
httpx.Client backed by httpx.MockTransport that routes requests to
StubGeoserver.
"""

import json
import logging
import os
import sys

import httpx
import pytest

# Add project root to sys.path so 'geoserver_client' is importable without installing
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import geoserver_client.app_config as app_config_module  # noqa: E402
import geoserver_client.config as geoserver_config_module  # noqa: E402
from geoserver_client import RestGeoserverClient  # noqa: E402

BASE_URL = "http://geoserver.test/geoserver"
USERNAME = "admin"
PASSWORD = "geoserver"


class StubGeoserver:
    """
    Canned GeoServer responses keyed on (method, path?query).

    Unregistered routes answer 404, like GeoServer does for unknown entities.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, status_code=200, json_body=None, text=None, raises=None):
        self.routes[(method, path)] = (status_code, json_body, text, raises)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.raw_path.decode())
        if key not in self.routes:
            return httpx.Response(404, text="No such resource")

        status_code, json_body, text, raises = self.routes[key]
        if raises is not None:
            raise raises(f"stubbed transport failure for {key}", request=request)
        if json_body is not None:
            return httpx.Response(status_code, json=json_body)
        return httpx.Response(status_code, text=text or "")

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def stub_geoserver():
    return StubGeoserver()


@pytest.fixture
def client_logger():
    """Plain stdlib logger so caplog sees every record."""
    logger = logging.getLogger("tests.geoserver_client")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def geoserver_client(stub_geoserver, client_logger):
    http_client = httpx.Client(transport=httpx.MockTransport(stub_geoserver.handler))
    client = RestGeoserverClient(
        base_url=BASE_URL,
        username=USERNAME,
        password=PASSWORD,
        http_client=http_client,
        logger=client_logger
    )
    yield client
    http_client.close()


@pytest.fixture(autouse=True)
def reset_config_caches():
    """Config singletons read the environment once; tests need a fresh read."""
    app_config_module.get_app_config.cache_clear()
    geoserver_config_module._config_cache = None
    yield
    app_config_module.get_app_config.cache_clear()
    geoserver_config_module._config_cache = None

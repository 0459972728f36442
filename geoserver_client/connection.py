# ============================================================================
# CLAUDE CONTEXT - DATASTORE CONNECTION DETAILS
# ============================================================================
# STATUS: Standalone Module - connection parameters handed to GeoServer
# PURPOSE: Type-safe producers of datastore connection parameter entries
# EXPORTS: ConnectionDetails, PostgisConnectionDetails, POSTGIS_TUNING_DEFAULTS
# DEPENDENCIES: abc, typing
# PATTERNS: Capability interface - client only ever calls entries()
# ============================================================================

"""
Datastore Connection Details

GeoServer connects to a datastore's backing source itself, so creating a
datastore means handing it a bag of string key/value parameters. Each
backing store type knows which keys it needs; the client never looks
inside, it only calls entries().

Adding a new backing store type means subclassing ConnectionDetails (or
providing any object with an entries() method returning Dict[str, str]).
"""

from abc import ABC, abstractmethod
from typing import Dict


class ConnectionDetails(ABC):
    """
    Source of the connection parameters sent when creating a datastore.
    """

    @abstractmethod
    def entries(self) -> Dict[str, str]:
        """Return the connection parameters as string key/value pairs."""
        raise NotImplementedError


# Secondary parameters sent with every PostGIS datastore.
# Keys are GeoServer's own parameter names, spaces included.
POSTGIS_TUNING_DEFAULTS: Dict[str, str] = {
    "Expose primary keys": "false",
    "max connections": "10",
    "min connections": "1",
    "fetch size": "1000",
    "Connection timeout": "20",
    "Loose bbox": "true",
    "Estimated extends": "true",
    "validate connections": "true",
    "preparedStatements": "false",
}


class PostgisConnectionDetails(ConnectionDetails):
    """
    Connection details for a PostGIS-backed datastore.

    Usage:
        details = PostgisConnectionDetails(
            host="postgis", port=5432,
            username="postgres", password="postgres",
            database="gis", schema="public"
        )
        client.create_datastore(CreateDatastoreRequest(
            name="roads", type="PostGIS", workspace="transport",
            connection_details=details
        ))
    """

    DB_TYPE = "postgis"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        database: str,
        schema: str = "public"
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.database = database
        self.schema = schema

    @classmethod
    def from_app_config(cls, config) -> "PostgisConnectionDetails":
        """
        Build connection details from the application settings.

        Args:
            config: AppConfig (see app_config.py)
        """
        return cls(
            host=config.postgis_host,
            port=config.postgis_port,
            username=config.postgis_user,
            password=config.postgis_password,
            database=config.postgis_database,
            schema=config.postgis_schema
        )

    def entries(self) -> Dict[str, str]:
        result = {
            "host": self.host,
            "port": str(self.port),
            "database": self.database,
            "schema": self.schema,
            "user": self.username,
            "passwd": self.password,
            "dbtype": self.DB_TYPE,
        }
        result.update(POSTGIS_TUNING_DEFAULTS)
        return result

    def __repr__(self) -> str:
        # Password deliberately left out
        return (
            f"PostgisConnectionDetails(host={self.host!r}, port={self.port!r}, "
            f"username={self.username!r}, database={self.database!r}, schema={self.schema!r})"
        )

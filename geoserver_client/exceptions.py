# ============================================================================
# CLAUDE CONTEXT - GEOSERVER CLIENT EXCEPTIONS
# ============================================================================
# STATUS: Standalone Module - error taxonomy for the GeoServer REST client
# PURPOSE: Separate transport failures from unexpected HTTP responses
# EXPORTS: GeoServerError, GeoServerConnectionError, GeoServerRequestError
# DEPENDENCIES: None (standard library only)
# ============================================================================

"""
GeoServer Client Exceptions

Two kinds of failure reach the caller:
1. Transport failures (server unreachable, DNS, connection reset)
2. Unexpected status codes on list and mutating operations

Existence checks never raise for a status code, and list operations
recover locally from GeoServer's malformed empty-collection bodies, so
neither shows up here.
"""

from typing import Optional


class GeoServerError(Exception):
    """
    Base class for all errors raised by the GeoServer client.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class GeoServerConnectionError(GeoServerError):
    """
    GeoServer could not be reached.

    The underlying httpx error is chained as __cause__.

    Examples:
        - Connection refused
        - DNS resolution failure
        - Connection reset / transport timeout
    """
    pass


class GeoServerRequestError(GeoServerError):
    """
    GeoServer answered with a status code the operation does not accept.

    The message names the entity and the operation, e.g.
    "unable to create workspace 'roads'". The response body is logged,
    never carried on the exception.
    """

    def __init__(self, message: str, status_code: int, url: Optional[str] = None):
        super().__init__(message, url=url)
        self.status_code = status_code

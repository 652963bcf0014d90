"""Exceptions raised by the Nextcloud OCS plugin.

Every failure surfaced to the host derives from :class:`NextcloudPluginError`,
so callers can tell plugin failures apart from programming errors. The
subclasses map onto the failure categories a query can hit:

- ConfigurationError: a required connection setting is missing
- NextcloudConnectionError: the connectivity probe failed at construction
- NextcloudRequestError: the request never produced an HTTP response
- NextcloudHTTPError: the server answered with status >= 400
- OCSDecodeError: the body is not a valid OCS envelope
- OCSAPIError: the envelope reports a non-"ok" status
- NotFoundError: a get-by-id found no matching record
- QualifierError: the query qualifiers are missing or malformed
"""


class NextcloudPluginError(Exception):
    """Base class for all plugin errors."""

    pass


class ConfigurationError(NextcloudPluginError, ValueError):
    """Raised when a required connection setting is missing or empty."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} must be configured")


class NextcloudConnectionError(NextcloudPluginError):
    """Raised when a client cannot verify connectivity on construction."""

    pass


class NextcloudRequestError(NextcloudPluginError):
    """Raised when the HTTP transport fails before a response arrives."""

    pass


class NextcloudHTTPError(NextcloudPluginError):
    """Raised for any HTTP response with status code >= 400.

    The raw response body is kept as text, whether or not it is JSON.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Nextcloud API error {status_code}: {body}")


class OCSDecodeError(NextcloudPluginError):
    """Raised when a response body cannot be decoded as an OCS envelope."""

    pass


class OCSAPIError(NextcloudPluginError):
    """Raised when an OCS envelope carries a status other than "ok".

    Nextcloud may report this with HTTP 200, so it is distinct from
    :class:`NextcloudHTTPError`.
    """

    def __init__(self, message: str, statuscode: int):
        self.message = message
        self.statuscode = statuscode
        super().__init__(f"OCS API error: {message} (code: {statuscode})")


class NotFoundError(NextcloudPluginError):
    """Raised when a get-by-id lookup finds no matching record."""

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with ID {identifier} not found")


class QualifierError(NextcloudPluginError, ValueError):
    """Raised when query qualifiers are missing, unknown or malformed."""

    pass

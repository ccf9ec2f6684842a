"""
Error types raised by the Macrostrat gateway.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ValidationError(GatewayError):
    """
    Raised when a tool or prompt argument is missing or malformed.

    Parameters
    ----------
    field : str
        Name of the offending argument
    constraint : str
        Human-readable description of the violated constraint
    """

    def __init__(self, field: str, constraint: str) -> None:
        super().__init__(f"Invalid argument '{field}': {constraint}")
        self.field = field
        self.constraint = constraint


class NotFoundError(GatewayError):
    """
    Raised when a tool, prompt, resource or root role is unknown.

    Parameters
    ----------
    kind : str
        What was looked up ("tool", "prompt", "resource", "root role")
    identifier : str
        The identifier that did not match anything
    """

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"Unknown {kind}: {identifier}")
        self.kind = kind
        self.identifier = identifier


class UpstreamError(GatewayError):
    """
    Raised when the Macrostrat API answers with a failure or cannot be reached.

    Parameters
    ----------
    status_code : int or None
        HTTP status code, or None for transport failures
    status_text : str
        Reason phrase or transport error description
    url : str
        The requested URL
    """

    def __init__(self, status_code: int | None, status_text: str, url: str) -> None:
        if status_code is None:
            message = f"Request to {url} failed: {status_text}"
        else:
            message = f"Request to {url} failed: {status_code} {status_text}"
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.url = url


class ImageFetchError(GatewayError):
    """
    Raised when a map tile image cannot be fetched or decoded.

    Parameters
    ----------
    url : str
        Tile URL
    reason : str
        Why the fetch failed
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(reason)
        self.url = url
        self.reason = reason

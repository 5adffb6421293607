from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories raised before the result is flattened to a string."""

    MISSING_ENDPOINT = "MissingEndpoint"
    INVALID_ENDPOINT_SCHEME = "InvalidEndpointScheme"
    MISSING_SESSION = "MissingSession"
    MISSING_CREDENTIAL = "MissingCredential"
    MISSING_PAYLOAD = "MissingPayload"
    HTTP_STATUS_ERROR = "HttpStatusError"
    TRANSPORT_ERROR = "TransportError"


class InvocationError(Exception):
    """Base exception class for webhook invocation errors."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class InvocationValidationError(InvocationError):
    """Raised when the inputs are rejected before any network access."""

    pass


class HttpStatusError(InvocationError):
    """Raised when the endpoint answers with a status outside [200, 300)."""

    def __init__(self, status_code: int, body: str, message: str):
        super().__init__(ErrorKind.HTTP_STATUS_ERROR, message)
        self.status_code = status_code
        self.body = body


class TransportError(InvocationError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(ErrorKind.TRANSPORT_ERROR, message)
        self.cause = cause

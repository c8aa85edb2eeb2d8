"""Typed API failures and their user-facing messages.

The API client raises a single ``ApiError`` whose ``kind`` is one of a
closed set; every screen renders it through ``user_message``.
"""

from enum import Enum


class ApiErrorKind(str, Enum):
    INVALID_URL = "invalid_url"
    NO_DATA = "no_data"
    DECODING = "decoding"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    SERVER = "server"
    NETWORK = "network"
    UNKNOWN = "unknown"


_MESSAGES: dict[ApiErrorKind, str] = {
    ApiErrorKind.INVALID_URL: "The request was invalid.",
    ApiErrorKind.NO_DATA: "No data was received.",
    ApiErrorKind.DECODING: "The response could not be processed.",
    ApiErrorKind.UNAUTHORIZED: "Your session has expired. Please log in again.",
    ApiErrorKind.FORBIDDEN: "You do not have access to this feature.",
    ApiErrorKind.SERVER: "Server error",
    ApiErrorKind.NETWORK: "A network error occurred. Please check your connection.",
    ApiErrorKind.UNKNOWN: "An unknown error occurred.",
}


class ApiError(Exception):
    """Failure reported by the API client.

    ``message`` carries the server's text for SERVER, UNAUTHORIZED and
    FORBIDDEN responses when the backend sends one.
    """

    def __init__(self, kind: ApiErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message or _MESSAGES[kind])

    @classmethod
    def from_status(cls, status_code: int, message: str | None = None) -> "ApiError":
        """Map an HTTP status code to an ApiError."""
        if status_code == 401:
            return cls(ApiErrorKind.UNAUTHORIZED, message)
        if status_code == 403:
            return cls(ApiErrorKind.FORBIDDEN, message)
        if status_code == 204:
            return cls(ApiErrorKind.NO_DATA, message)
        if status_code >= 400:
            return cls(ApiErrorKind.SERVER, message or f"HTTP {status_code}")
        return cls(ApiErrorKind.UNKNOWN, message)


def user_message(error: BaseException, context: str | None = None) -> str:
    """Return the text shown to the user for any failure.

    Exceptions that are not ApiError come from the transport layer and
    are reported as network errors.
    """
    if isinstance(error, ApiError):
        text = _MESSAGES[error.kind]
        if error.kind is ApiErrorKind.SERVER and error.message:
            text = f"{text}: {error.message}"
    else:
        text = _MESSAGES[ApiErrorKind.NETWORK]
    if context:
        return f"{context} failed. {text}"
    return text

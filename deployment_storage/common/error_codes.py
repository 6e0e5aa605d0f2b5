"""
Error codes for the deployment storage layer.

Error codes follow the format: Deploy-{Component}-{HTTP_Code}-{Unique_ID}

Components:
- Auth: Credential resolution errors
- Storage: Blob and container operation errors
- Common: Input validation errors
"""

from enum import Enum
from typing import Dict, Optional


class ErrorComponent(Enum):
    """Components that can generate errors in the system."""

    AUTH = "Auth"
    STORAGE = "Storage"
    COMMON = "Common"


class ErrorCode:
    """Error code with component, HTTP code, and description."""

    def __init__(
        self, component: str, http_code: str, unique_id: str, description: str
    ):
        self.code = f"Deploy-{component}-{http_code}-{unique_id}"
        self.description = description

    def __str__(self) -> str:
        return f"{self.code}: {self.description}"


AUTH = ErrorComponent.AUTH.value
STORAGE = ErrorComponent.STORAGE.value
COMMON = ErrorComponent.COMMON.value

# Auth Errors
AUTH_ERRORS = {
    "ACCOUNT_KEY_ERROR": ErrorCode(
        AUTH, "401", "00", "Storage account key lookup failed"
    ),
    "LOGIN_ERROR": ErrorCode(AUTH, "401", "01", "Login or token acquisition failed"),
    "UNSUPPORTED_AUTH_ERROR": ErrorCode(
        AUTH, "403", "00", "Operation not supported by the active auth strategy"
    ),
}

# Storage Errors
STORAGE_ERRORS = {
    "CLIENT_NOT_INITIALIZED_ERROR": ErrorCode(
        STORAGE, "500", "00", "Storage client used before initialization"
    ),
    "DOWNLOAD_TIMEOUT_ERROR": ErrorCode(
        STORAGE, "504", "00", "Blob download timed out"
    ),
}

# Common Errors
COMMON_ERRORS = {
    "CONTAINER_NAME_ERROR": ErrorCode(COMMON, "400", "00", "Invalid container name"),
    "BLOB_NAME_ERROR": ErrorCode(COMMON, "400", "01", "Invalid blob name"),
    "INPUT_VALIDATION_ERROR": ErrorCode(
        COMMON, "400", "02", "Input validation failed"
    ),
}

# Combined dictionary of all error codes
ERROR_CODES: Dict[str, ErrorCode] = {
    **AUTH_ERRORS,
    **STORAGE_ERRORS,
    **COMMON_ERRORS,
}


class StorageClientError(Exception):
    """Base exception for the deployment storage layer.

    Attributes:
        error_code: The catalogued error code for this failure.
    """

    default_code: ErrorCode = COMMON_ERRORS["INPUT_VALIDATION_ERROR"]

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        self.error_code = error_code or self.default_code
        super().__init__(f"{self.error_code}: {message}")


class AuthError(StorageClientError):
    """Raised when the account key lookup or the login flow fails."""

    default_code = AUTH_ERRORS["LOGIN_ERROR"]


class UnsupportedAuthError(StorageClientError):
    """Raised when an operation needs material the active auth strategy never holds.

    Token sessions carry no account key, so they can never sign a
    shared access signature.
    """

    default_code = AUTH_ERRORS["UNSUPPORTED_AUTH_ERROR"]


class ValidationError(StorageClientError):
    """Raised for malformed container or blob names before any request is made."""

    default_code = COMMON_ERRORS["INPUT_VALIDATION_ERROR"]


class NotInitializedError(StorageClientError):
    default_code = STORAGE_ERRORS["CLIENT_NOT_INITIALIZED_ERROR"]


class DownloadTimeoutError(StorageClientError, TimeoutError):
    """Raised when a chunked download exceeds its deadline.

    Outstanding chunk requests are cancelled before this is raised.
    """

    default_code = STORAGE_ERRORS["DOWNLOAD_TIMEOUT_ERROR"]

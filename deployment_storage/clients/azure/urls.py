"""
Service, container and blob handle construction.

Handles are ``azure.storage.blob.aio`` clients. Building them performs no
network I/O; names are validated up front so malformed requests never leave
the process.
"""

import re

from azure.storage.blob.aio import BlobClient, BlobServiceClient, ContainerClient

from deployment_storage.clients.azure.auth import StorageCredential
from deployment_storage.common.error_codes import COMMON_ERRORS, ValidationError
from deployment_storage.constants import AZURE_STORAGE_ENDPOINT_SUFFIX

AZURE_BLOB_URL_TEMPLATE = "https://{account_name}.{endpoint_suffix}"

# Lower-case letters, digits and single hyphens, 3-63 characters, starting and
# ending with a letter or digit.
CONTAINER_NAME_PATTERN = re.compile(r"(?!.*--)[a-z0-9][a-z0-9-]{1,61}[a-z0-9]")
SYSTEM_CONTAINERS = {"$root", "$web", "$logs"}

BLOB_NAME_MAX_LENGTH = 1024
BLOB_PATH_MAX_SEGMENTS = 254


def normalize_container_name(container_name: str) -> str:
    """Lower-case a container name and check it against Azure's naming rules.

    Raises:
        ValidationError: If the name is not a valid container name.
    """
    if not isinstance(container_name, str) or not container_name:
        raise ValidationError(
            "Container name must be a non-empty string",
            COMMON_ERRORS["CONTAINER_NAME_ERROR"],
        )

    name = container_name.lower()
    if name in SYSTEM_CONTAINERS or CONTAINER_NAME_PATTERN.fullmatch(name):
        return name

    raise ValidationError(
        f"'{container_name}' must be 3-63 letters, digits or single hyphens, "
        "starting and ending with a letter or digit",
        COMMON_ERRORS["CONTAINER_NAME_ERROR"],
    )


def validate_blob_path(blob_path: str) -> str:
    """Check a blob path (virtual directories allowed) and return it unchanged.

    Raises:
        ValidationError: If the path is empty, too long, too deep or ends in ``/`` or ``.``.
    """
    if not isinstance(blob_path, str) or not blob_path.strip("/"):
        raise ValidationError(
            "Blob name must be a non-empty string",
            COMMON_ERRORS["BLOB_NAME_ERROR"],
        )
    if len(blob_path) > BLOB_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Blob name exceeds {BLOB_NAME_MAX_LENGTH} characters",
            COMMON_ERRORS["BLOB_NAME_ERROR"],
        )
    if blob_path.count("/") >= BLOB_PATH_MAX_SEGMENTS:
        raise ValidationError(
            f"Blob name '{blob_path}' has more than {BLOB_PATH_MAX_SEGMENTS} path segments",
            COMMON_ERRORS["BLOB_NAME_ERROR"],
        )
    if blob_path.endswith(("/", ".")):
        raise ValidationError(
            f"Blob name '{blob_path}' must not end with '/' or '.'",
            COMMON_ERRORS["BLOB_NAME_ERROR"],
        )
    return blob_path


def get_account_url(account_name: str) -> str:
    return AZURE_BLOB_URL_TEMPLATE.format(
        account_name=account_name, endpoint_suffix=AZURE_STORAGE_ENDPOINT_SUFFIX
    )


def build_service_url(
    account_name: str, credential: StorageCredential
) -> BlobServiceClient:
    """Root handle for the storage account, signed with ``credential``."""
    return BlobServiceClient(
        account_url=get_account_url(account_name),
        credential=credential.to_sdk_credential(),
    )


def build_container_url(
    service: BlobServiceClient, container_name: str
) -> ContainerClient:
    return service.get_container_client(normalize_container_name(container_name))


def build_blob_url(container: ContainerClient, blob_path: str) -> BlobClient:
    return container.get_blob_client(validate_blob_path(blob_path))

"""
Azure Blob Storage client module.

This module provides the storage access layer used by deployment workflows:

- CredentialResolver: shared-key or token credential resolution
- URL builders: service, container and blob handles
- AzureBlobStorageService: container lifecycle, blob transfer and SAS URLs
"""

AZURE_STORAGE_SCOPE = "https://storage.azure.com/.default"

from .auth import (  # noqa: E402
    AccessTokenCredential,
    ArmKeyProvider,
    AuthStrategy,
    AzureLoginProvider,
    CredentialResolver,
    KeyProvider,
    LoginProvider,
    SharedKeyCredential,
    StorageCredential,
)
from .storage import AzureBlobStorageService  # noqa: E402

__all__ = [
    "AZURE_STORAGE_SCOPE",
    # Authentication
    "AuthStrategy",
    "AccessTokenCredential",
    "SharedKeyCredential",
    "StorageCredential",
    "CredentialResolver",
    "KeyProvider",
    "LoginProvider",
    "ArmKeyProvider",
    "AzureLoginProvider",
    # Storage service
    "AzureBlobStorageService",
]

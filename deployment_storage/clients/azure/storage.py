"""
Azure Blob Storage service used by deployment workflows.

Example:
    >>> from deployment_storage.clients.azure import (
    ...     AuthStrategy,
    ...     AzureBlobStorageService,
    ... )
    >>> from deployment_storage.common.naming import DeploymentConfig
    >>>
    >>> config = DeploymentConfig(service="my-app", subscription_id="...")
    >>> async with AzureBlobStorageService(config) as storage:
    ...     await storage.initialize()
    ...     await storage.create_container_if_not_exists("deployments")
    ...     await storage.upload_file(".serverless/my-app.zip", "deployments")
    ...     url = await storage.generate_blob_sas_token_url(
    ...         "deployments", "my-app.zip"
    ...     )
    >>>
    >>> # Token auth cannot sign SAS URLs
    >>> token_storage = AzureBlobStorageService(config, auth_strategy=AuthStrategy.TOKEN)
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set

import aiofiles
from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobSasPermissions, generate_blob_sas
from azure.storage.blob.aio import BlobServiceClient

from deployment_storage.clients import ClientInterface
from deployment_storage.clients.azure.auth import (
    ArmKeyProvider,
    AuthStrategy,
    AzureLoginProvider,
    CredentialResolver,
    KeyProvider,
    LoginProvider,
    SharedKeyCredential,
    StorageCredential,
)
from deployment_storage.clients.azure.transfer import (
    TransferSettings,
    download_with_timeout,
)
from deployment_storage.clients.azure.urls import (
    build_blob_url,
    build_container_url,
    build_service_url,
    normalize_container_name,
)
from deployment_storage.common.error_codes import (
    AUTH_ERRORS,
    AuthError,
    NotInitializedError,
    UnsupportedAuthError,
    ValidationError,
)
from deployment_storage.common.naming import (
    DeploymentConfig,
    get_resource_group_name,
    get_storage_account_name,
)
from deployment_storage.constants import AZURE_SUBSCRIPTION_ID, SAS_EXPIRY_MINUTES
from deployment_storage.observability.logger_adaptor import get_logger

logger = get_logger(__name__)


class AzureBlobStorageService(ClientInterface):
    """
    Blob storage access for one deployment's storage account.

    ``initialize()`` must complete before any other operation. The existence
    cache assumes calls on one instance come from a single event loop.

    Attributes:
        config (DeploymentConfig): Deployment identity.
        options (Dict[str, str]): Command-line overrides (region, stage, ...).
        auth_strategy (AuthStrategy): Fixed for the lifetime of the instance.
        account_name (str): Storage account name.
        credential (Optional[StorageCredential]): Set by ``initialize()``.
        transfer_settings (TransferSettings): Chunked download tuning.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        options: Optional[Dict[str, str]] = None,
        auth_strategy: AuthStrategy = AuthStrategy.SHARED_KEY,
        key_provider: Optional[KeyProvider] = None,
        login_provider: Optional[LoginProvider] = None,
        transfer_settings: Optional[TransferSettings] = None,
    ):
        self.config = config
        self.options = options or {}
        self.auth_strategy = auth_strategy
        self.account_name = get_storage_account_name(config, self.options)
        self.login_provider = login_provider or AzureLoginProvider()
        self.key_provider = key_provider
        self.transfer_settings = transfer_settings or TransferSettings()
        self.credential: Optional[StorageCredential] = None
        self._service: Optional[BlobServiceClient] = None
        self._known_containers: Optional[Set[str]] = None

    @property
    def service(self) -> BlobServiceClient:
        if self._service is None:
            raise NotInitializedError(
                "Call initialize() before using the storage service"
            )
        return self._service

    async def load(self) -> None:
        await self.initialize()

    async def initialize(self) -> None:
        """
        Resolve the credential and build the service handle.

        Safe to call again; each call fetches fresh credential material.

        Raises:
            AuthError: If the key listing or login fails.
        """
        resolver = CredentialResolver(
            account_name=self.account_name,
            strategy=self.auth_strategy,
            key_provider=self._get_key_provider(),
            login_provider=self.login_provider,
        )
        credential = await resolver.resolve()

        await self._close_service()
        self.credential = credential
        self._service = build_service_url(self.account_name, credential)
        logger.info(
            f"Storage service initialized for account {self.account_name} "
            f"using {self.auth_strategy.value} auth"
        )

    async def close(self) -> None:
        """Release the underlying storage clients."""
        await self._close_service()
        self.credential = None
        self._known_containers = None

    async def list_containers(self) -> List[str]:
        """Return container names in the order the store lists them."""
        logger.info(f"Listing containers in {self.account_name}")
        names = []
        async for container in self.service.list_containers():
            names.append(container.name)
        return names

    async def create_container_if_not_exists(self, name: str) -> None:
        """
        Create a container unless it is already known to exist.

        The first call seeds the existence cache with one container listing.
        A conflict from the store counts as success.

        Args:
            name: Container name; lower-cased before use.
        """
        container_name = normalize_container_name(name)
        known_containers = await self._get_known_containers()
        if container_name in known_containers:
            logger.debug(f"Container {container_name} already exists")
            return

        container = build_container_url(self.service, container_name)
        logger.info(f"Creating container {container_name}")
        try:
            await container.create_container()
        except ResourceExistsError:
            logger.debug(f"Container {container_name} was created concurrently")
        known_containers.add(container_name)

    async def delete_container(self, name: str) -> None:
        container = build_container_url(self.service, name)
        logger.info(f"Deleting container {container.container_name}")
        await container.delete_container()
        if self._known_containers is not None:
            self._known_containers.discard(container.container_name)

    async def upload_file(
        self, local_path: str, container_name: str, blob_path: Optional[str] = None
    ) -> None:
        """
        Stream a local file to a block blob, replacing any existing blob.

        Args:
            local_path: File to upload.
            container_name: Target container.
            blob_path: Blob path, may include virtual directories. Defaults to
                the file's base name.
        """
        blob_name = blob_path or os.path.basename(local_path)
        container = build_container_url(self.service, container_name)
        blob = build_blob_url(container, blob_name)

        logger.info(
            f"Uploading {local_path} to {container.container_name}/{blob_name}"
        )
        async with aiofiles.open(local_path, "rb") as data:
            await blob.upload_blob(data, overwrite=True)
        logger.info(f"Uploaded {container.container_name}/{blob_name}")

    async def delete_file(self, container_name: str, blob_name: str) -> None:
        container = build_container_url(self.service, container_name)
        blob = build_blob_url(container, blob_name)
        logger.info(f"Deleting blob {container.container_name}/{blob_name}")
        await blob.delete_blob()

    async def list_files(
        self, container_name: str, extension: Optional[str] = None
    ) -> List[str]:
        """
        List every blob name in a container.

        Args:
            container_name: Container to list.
            extension: Keep only names ending in this extension; ``"zip"`` and
                ``".zip"`` are equivalent.

        Returns:
            List[str]: Matching blob names, possibly empty.
        """
        container = build_container_url(self.service, container_name)
        suffix = None
        if extension:
            suffix = extension if extension.startswith(".") else f".{extension}"

        logger.info(f"Listing blobs in {container.container_name}")
        names = []
        async for blob in container.list_blobs():
            if suffix is None or blob.name.endswith(suffix):
                names.append(blob.name)
        return names

    async def download_binary(
        self, container_name: str, blob_name: str, target_path: str
    ) -> None:
        """
        Download a blob to ``target_path`` using parallel range requests.

        Raises:
            DownloadTimeoutError: If the transfer exceeds the configured timeout.
        """
        container = build_container_url(self.service, container_name)
        blob = build_blob_url(container, blob_name)

        properties = await blob.get_blob_properties()
        buffer = bytearray(properties.size)
        logger.info(
            f"Downloading {container.container_name}/{blob_name} "
            f"({properties.size} bytes) to {target_path}"
        )
        if properties.size:
            await download_with_timeout(blob, buffer, self.transfer_settings)

        async with aiofiles.open(target_path, "wb") as f:
            await f.write(buffer)
        logger.info(f"Downloaded {container.container_name}/{blob_name}")

    async def generate_blob_sas_token_url(
        self,
        container_name: str,
        blob_name: str,
        expiry_minutes: int = SAS_EXPIRY_MINUTES,
    ) -> str:
        """
        Build a read-only shared access signature URL for a blob.

        Args:
            container_name: Container holding the blob.
            blob_name: Blob path.
            expiry_minutes: Minutes from now until the signature expires.

        Returns:
            str: ``<blob url>?<sas query string>``.

        Raises:
            UnsupportedAuthError: Under token auth, which holds no account key.
        """
        if self.auth_strategy != AuthStrategy.SHARED_KEY:
            raise UnsupportedAuthError(
                "Shared key authentication is required to generate SAS tokens"
            )
        if expiry_minutes <= 0:
            raise ValidationError("SAS expiry must be a positive number of minutes")

        credential = self._require_credential()
        container = build_container_url(self.service, container_name)
        blob = build_blob_url(container, blob_name)

        start = datetime.now(timezone.utc)
        sas_token = generate_blob_sas(
            account_name=credential.account_name,
            container_name=container.container_name,
            blob_name=blob_name,
            account_key=credential.account_key,
            permission=BlobSasPermissions(read=True),
            start=start,
            expiry=start + timedelta(minutes=expiry_minutes),
            protocol="https,http",
        )
        logger.debug(f"Generated SAS URL for {container.container_name}/{blob_name}")
        return f"{blob.url}?{sas_token}"

    def _require_credential(self) -> SharedKeyCredential:
        if not isinstance(self.credential, SharedKeyCredential):
            raise NotInitializedError(
                "Call initialize() before generating SAS tokens"
            )
        return self.credential

    def _get_key_provider(self) -> Optional[KeyProvider]:
        if (
            self.key_provider is not None
            or self.auth_strategy != AuthStrategy.SHARED_KEY
        ):
            return self.key_provider

        subscription_id = self.config.subscription_id or AZURE_SUBSCRIPTION_ID
        if not subscription_id:
            raise AuthError(
                "A subscription id is required to list storage account keys",
                AUTH_ERRORS["ACCOUNT_KEY_ERROR"],
            )
        return ArmKeyProvider(
            self.login_provider,
            subscription_id,
            get_resource_group_name(self.config, self.options),
        )

    async def _get_known_containers(self) -> Set[str]:
        if self._known_containers is None:
            self._known_containers = {
                name.lower() for name in await self.list_containers()
            }
        return self._known_containers

    async def _close_service(self) -> None:
        if self._service is not None:
            await self._service.close()
            self._service = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

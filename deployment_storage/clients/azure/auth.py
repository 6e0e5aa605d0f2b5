"""
Credential resolution for Azure Blob Storage.

A storage service authenticates with one of two strategies:

- ``AuthStrategy.SHARED_KEY``: the first account key returned by the
  control-plane key listing is paired with the account name.
- ``AuthStrategy.TOKEN``: a login provider yields an Azure AD session whose
  access token is fetched once and used as a bearer token.

Key listing and login are injected as :class:`KeyProvider` and
:class:`LoginProvider` so they can be replaced in tests.

Example:
    >>> from deployment_storage.clients.azure.auth import (
    ...     AuthStrategy,
    ...     AzureLoginProvider,
    ...     CredentialResolver,
    ... )
    >>>
    >>> login = AzureLoginProvider.from_credentials(
    ...     {"tenantId": "...", "clientId": "...", "clientSecret": "..."}
    ... )
    >>> resolver = CredentialResolver(
    ...     account_name="slswusdevmyapp",
    ...     strategy=AuthStrategy.TOKEN,
    ...     login_provider=login,
    ... )
    >>> credential = await resolver.resolve()
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from azure.core.credentials import AccessToken, AzureNamedKeyCredential
from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.storage.aio import StorageManagementClient

from deployment_storage.clients.azure import AZURE_STORAGE_SCOPE
from deployment_storage.common.error_codes import AUTH_ERRORS, AuthError
from deployment_storage.constants import (
    AZURE_CLIENT_ID,
    AZURE_CLIENT_SECRET,
    AZURE_TENANT_ID,
)
from deployment_storage.observability.logger_adaptor import get_logger

logger = get_logger(__name__)


class AuthStrategy(Enum):
    """How the storage service signs its requests."""

    SHARED_KEY = "shared_key"
    TOKEN = "token"


@dataclass(frozen=True)
class SharedKeyCredential:
    """Account name and symmetric account key."""

    account_name: str
    account_key: str = field(repr=False)

    @property
    def strategy(self) -> AuthStrategy:
        return AuthStrategy.SHARED_KEY

    def to_sdk_credential(self) -> AzureNamedKeyCredential:
        return AzureNamedKeyCredential(self.account_name, self.account_key)


@dataclass(frozen=True)
class AccessTokenCredential:
    """Bearer token fetched once from a login session."""

    access_token: str = field(repr=False)
    expires_on: int = 0

    @property
    def strategy(self) -> AuthStrategy:
        return AuthStrategy.TOKEN

    def to_sdk_credential(self) -> "StaticTokenCredential":
        return StaticTokenCredential(AccessToken(self.access_token, self.expires_on))


StorageCredential = Union[SharedKeyCredential, AccessTokenCredential]


class StaticTokenCredential:
    """Async token credential that always returns the same token.

    The storage pipeline asks for a token on every request; refreshing it is
    left to whoever calls ``initialize()`` again.
    """

    def __init__(self, token: AccessToken):
        self._token = token

    async def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        return self._token

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "StaticTokenCredential":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        pass


@runtime_checkable
class KeyProvider(Protocol):
    """Lists the access keys of a storage account."""

    async def list_keys(self, account_name: str) -> List[str]: ...


@runtime_checkable
class LoginProvider(Protocol):
    """Produces a fresh Azure AD credential, owned by the caller."""

    async def login(self) -> AsyncTokenCredential: ...


class AzureLoginProvider:
    """
    Login provider backed by ``azure.identity``.

    Uses a service principal when tenant, client id and client secret are all
    known, otherwise falls back to ``DefaultAzureCredential`` (environment,
    managed identity, Azure CLI, ...).
    """

    def __init__(
        self,
        tenant_id: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        self.tenant_id = tenant_id or AZURE_TENANT_ID
        self.client_id = client_id or AZURE_CLIENT_ID
        self.client_secret = client_secret or AZURE_CLIENT_SECRET

    @classmethod
    def from_credentials(cls, credentials: Dict[str, Any]) -> "AzureLoginProvider":
        """Build a provider from snake_case or camelCase service principal keys."""
        return cls(
            tenant_id=credentials.get("tenant_id") or credentials.get("tenantId"),
            client_id=credentials.get("client_id") or credentials.get("clientId"),
            client_secret=credentials.get("client_secret")
            or credentials.get("clientSecret"),
        )

    @property
    def has_service_principal(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)

    async def login(self) -> AsyncTokenCredential:
        if self.has_service_principal:
            logger.debug(
                f"Logging in with service principal for tenant: {self.tenant_id}"
            )
            return ClientSecretCredential(
                str(self.tenant_id), str(self.client_id), str(self.client_secret)
            )

        logger.debug("Service principal incomplete, using DefaultAzureCredential")
        return DefaultAzureCredential()


class ArmKeyProvider:
    """Key provider that calls the storage resource provider's ``listKeys``."""

    def __init__(
        self,
        login_provider: LoginProvider,
        subscription_id: str,
        resource_group: str,
    ):
        self.login_provider = login_provider
        self.subscription_id = subscription_id
        self.resource_group = resource_group

    async def list_keys(self, account_name: str) -> List[str]:
        credential = await self.login_provider.login()
        try:
            async with StorageManagementClient(
                credential, self.subscription_id
            ) as client:
                result = await client.storage_accounts.list_keys(
                    self.resource_group, account_name
                )
        finally:
            await credential.close()

        return [key.value for key in result.keys or []]


class CredentialResolver:
    """
    Materializes a :data:`StorageCredential` for one storage account.

    Attributes:
        account_name (str): Storage account being accessed.
        strategy (AuthStrategy): Selected authentication strategy.
        key_provider (Optional[KeyProvider]): Required for shared-key auth.
        login_provider (Optional[LoginProvider]): Required for token auth.
    """

    def __init__(
        self,
        account_name: str,
        strategy: AuthStrategy = AuthStrategy.SHARED_KEY,
        key_provider: Optional[KeyProvider] = None,
        login_provider: Optional[LoginProvider] = None,
    ):
        self.account_name = account_name
        self.strategy = strategy
        self.key_provider = key_provider
        self.login_provider = login_provider

    async def resolve(self) -> StorageCredential:
        """
        Fetch credential material for the configured strategy.

        Every call goes back to the key provider or login provider; nothing is
        cached here.

        Returns:
            StorageCredential: Shared-key or access-token credential.

        Raises:
            AuthError: If the key listing or login fails, or returns nothing usable.
        """
        logger.info(
            f"Resolving {self.strategy.value} credential for storage account "
            f"{self.account_name}"
        )
        if self.strategy == AuthStrategy.SHARED_KEY:
            return await self._resolve_shared_key()
        return await self._resolve_token()

    async def _resolve_shared_key(self) -> SharedKeyCredential:
        if self.key_provider is None:
            raise AuthError(
                "A key provider is required for shared key authentication",
                AUTH_ERRORS["ACCOUNT_KEY_ERROR"],
            )

        try:
            keys = await self.key_provider.list_keys(self.account_name)
        except Exception as e:
            logger.error(f"Failed to list keys for {self.account_name}: {str(e)}")
            raise AuthError(str(e), AUTH_ERRORS["ACCOUNT_KEY_ERROR"]) from e

        if not keys:
            raise AuthError(
                f"No access keys returned for storage account {self.account_name}",
                AUTH_ERRORS["ACCOUNT_KEY_ERROR"],
            )

        return SharedKeyCredential(self.account_name, keys[0])

    async def _resolve_token(self) -> AccessTokenCredential:
        if self.login_provider is None:
            raise AuthError(
                "A login provider is required for token authentication",
                AUTH_ERRORS["LOGIN_ERROR"],
            )

        try:
            session = await self.login_provider.login()
            try:
                token = await session.get_token(AZURE_STORAGE_SCOPE)
            finally:
                await session.close()
        except Exception as e:
            logger.error(f"Login failed: {str(e)}")
            raise AuthError(str(e), AUTH_ERRORS["LOGIN_ERROR"]) from e

        if not token or not token.token:
            raise AuthError(
                "Login returned an empty access token", AUTH_ERRORS["LOGIN_ERROR"]
            )

        return AccessTokenCredential(token.token, token.expires_on)

"""In-memory doubles for the storage SDK, key listing and login."""

import asyncio
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

from azure.core.credentials import AccessToken
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

ACCOUNT_KEY = "c2VjcmV0LWFjY291bnQta2V5"  # base64 of "secret-account-key"
ACCESS_TOKEN = "myToken"


async def async_iter(items):
    for item in items:
        yield item


class FakeKeyProvider:
    """Key provider returning fixed keys and recording lookups."""

    def __init__(
        self, keys: Optional[List[str]] = None, error: Optional[Exception] = None
    ):
        self.keys = [ACCOUNT_KEY] if keys is None else keys
        self.error = error
        self.calls: List[str] = []

    async def list_keys(self, account_name: str) -> List[str]:
        self.calls.append(account_name)
        if self.error:
            raise self.error
        return list(self.keys)


class FakeSession:
    def __init__(self, token: str):
        self.token = token
        self.scopes: Tuple[str, ...] = ()
        self.closed = False

    async def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        self.scopes = scopes
        return AccessToken(self.token, 4102444800)

    async def close(self) -> None:
        self.closed = True


class FakeLoginProvider:
    """Login provider handing out sessions with a fixed token."""

    def __init__(
        self, token: str = ACCESS_TOKEN, error: Optional[Exception] = None
    ):
        self.token = token
        self.error = error
        self.sessions: List[FakeSession] = []

    async def login(self) -> FakeSession:
        if self.error:
            raise self.error
        session = FakeSession(self.token)
        self.sessions.append(session)
        return session


class FakeDownloader:
    def __init__(self, data: bytes):
        self._data = data

    async def readall(self) -> bytes:
        return self._data


class FakeBlob:
    def __init__(
        self, store: "FakeBlobService", container_name: str, blob_name: str
    ):
        self.store = store
        self.container_name = container_name
        self.blob_name = blob_name
        self.url = (
            f"https://{store.account_name}.blob.core.windows.net/"
            f"{container_name}/{blob_name}"
        )

    @property
    def key(self) -> Tuple[str, str]:
        return self.container_name, self.blob_name

    async def upload_blob(self, data, overwrite: bool = False, **kwargs) -> None:
        if self.container_name not in self.store.containers:
            raise ResourceNotFoundError("The specified container does not exist.")
        if self.key in self.store.blobs and not overwrite:
            raise ResourceExistsError("The specified blob already exists.")
        # Streams must be async readable, like aiofiles handles.
        content = await data.read() if hasattr(data, "read") else bytes(data)
        self.store.blobs[self.key] = content

    async def delete_blob(self, **kwargs) -> None:
        if self.key not in self.store.blobs:
            raise ResourceNotFoundError("The specified blob does not exist.")
        del self.store.blobs[self.key]

    async def get_blob_properties(self, **kwargs) -> SimpleNamespace:
        if self.key not in self.store.blobs:
            raise ResourceNotFoundError("The specified blob does not exist.")
        return SimpleNamespace(
            name=self.blob_name, size=len(self.store.blobs[self.key])
        )

    async def download_blob(
        self, offset: int = 0, length: Optional[int] = None, **kwargs
    ):
        content = self.store.blobs[self.key]
        end = len(content) if length is None else offset + length
        self.store.range_requests.append((offset, length))
        self.store.in_flight += 1
        self.store.max_in_flight = max(self.store.max_in_flight, self.store.in_flight)
        try:
            await asyncio.sleep(self.store.latency)
        finally:
            self.store.in_flight -= 1
        return FakeDownloader(content[offset:end])


class FakeContainer:
    def __init__(self, store: "FakeBlobService", container_name: str):
        self.store = store
        self.container_name = container_name

    async def create_container(self, **kwargs) -> None:
        self.store.create_calls.append(self.container_name)
        if self.container_name in self.store.containers:
            raise ResourceExistsError("The specified container already exists.")
        self.store.containers.append(self.container_name)

    async def delete_container(self, **kwargs) -> None:
        if self.container_name not in self.store.containers:
            raise ResourceNotFoundError("The specified container does not exist.")
        self.store.containers.remove(self.container_name)

    def list_blobs(self, **kwargs):
        names = [
            blob_name
            for container_name, blob_name in self.store.blobs
            if container_name == self.container_name
        ]
        return async_iter(SimpleNamespace(name=name) for name in names)

    def get_blob_client(self, blob: str) -> FakeBlob:
        return FakeBlob(self.store, self.container_name, blob)


class FakeBlobService:
    """In-memory stand-in for ``azure.storage.blob.aio.BlobServiceClient``."""

    def __init__(self, account_name: str = "fakeaccount"):
        self.account_name = account_name
        self.containers: List[str] = []
        self.blobs: Dict[Tuple[str, str], bytes] = {}
        self.create_calls: List[str] = []
        self.container_client_calls: List[str] = []
        self.list_container_calls = 0
        self.range_requests: List[Tuple[int, Optional[int]]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.latency = 0.001
        self.closed = False

    def list_containers(self, **kwargs):
        self.list_container_calls += 1
        names = list(self.containers)
        return async_iter(SimpleNamespace(name=name) for name in names)

    def get_container_client(self, container: str) -> FakeContainer:
        self.container_client_calls.append(container)
        return FakeContainer(self, container)

    async def close(self) -> None:
        self.closed = True



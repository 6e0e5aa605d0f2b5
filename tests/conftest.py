"""Global test configuration and fixtures."""

from unittest.mock import patch

import pytest

from deployment_storage.common.naming import DeploymentConfig
from deployment_storage.test_utils.fakes import (
    FakeBlobService,
    FakeKeyProvider,
    FakeLoginProvider,
)


@pytest.fixture
def deployment_config() -> DeploymentConfig:
    return DeploymentConfig(service="my-app", subscription_id="sub-123")


@pytest.fixture
def key_provider() -> FakeKeyProvider:
    return FakeKeyProvider()


@pytest.fixture
def login_provider() -> FakeLoginProvider:
    return FakeLoginProvider()


@pytest.fixture
def fake_blob_service():
    """Route every service handle built by the storage service to one fake store."""
    service = FakeBlobService()
    with patch(
        "deployment_storage.clients.azure.storage.build_service_url",
        return_value=service,
    ) as mock_build:
        service.build_mock = mock_build
        yield service

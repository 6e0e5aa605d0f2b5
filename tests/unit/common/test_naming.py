"""Unit tests for deployment naming conventions."""

import re

from hypothesis import given

from deployment_storage.common.naming import (
    DeploymentConfig,
    get_region,
    get_resource_group_name,
    get_stage,
    get_storage_account_name,
    shorten_region,
)
from deployment_storage.test_utils.hypothesis.strategies.storage import (
    region_strategy,
    service_name_strategy,
)


class TestRegionAndStage:
    """Test cases for region and stage resolution."""

    def test_defaults(self):
        """Test default region and stage values if not defined."""
        config = DeploymentConfig(service="my-app")

        assert get_region(config) == "westus"
        assert get_stage(config) == "dev"

    def test_config_values(self):
        config = DeploymentConfig(service="my-app", region="eastus2", stage="qa")

        assert get_region(config) == "eastus2"
        assert get_stage(config) == "qa"

    def test_cli_options_win(self):
        """Test that region and stage come from CLI options first."""
        config = DeploymentConfig(service="my-app", region="eastus2", stage="qa")
        options = {"stage": "prod", "region": "northeurope"}

        assert get_region(config, options) == "northeurope"
        assert get_stage(config, options) == "prod"


class TestResourceGroupName:
    """Test cases for resource group naming."""

    def test_configured_resource_group(self):
        config = DeploymentConfig(service="my-app", resource_group="My-Resource-Group")

        assert get_resource_group_name(config) == "My-Resource-Group"

    def test_resource_group_option(self):
        config = DeploymentConfig(service="my-app", resource_group="My-Resource-Group")

        assert get_resource_group_name(config, {"resourceGroup": "cli-rg"}) == "cli-rg"

    def test_convention(self):
        """Test resource group from convention when not configured."""
        config = DeploymentConfig(service="My custom service")

        assert (
            get_resource_group_name(config, {"region": "eastus", "stage": "prod"})
            == "My custom service-eastus-prod-rg"
        )


class TestStorageAccountName:
    """Test cases for storage account naming."""

    def test_shorten_region(self):
        assert shorten_region("westus") == "wus"
        assert shorten_region("EastUS2") == "eus2"
        assert shorten_region("northcentralus") == "ncus"

    def test_convention(self):
        config = DeploymentConfig(service="my-app")

        assert get_storage_account_name(config) == "slswusdevmyapp"

    def test_stage_is_truncated(self):
        config = DeploymentConfig(service="api", stage="production")

        assert get_storage_account_name(config) == "slswusproapi"

    def test_explicit_name(self):
        config = DeploymentConfig(service="my-app", storage_account="customaccount")

        assert get_storage_account_name(config) == "customaccount"

    def test_long_name_is_truncated(self):
        config = DeploymentConfig(service="a-really-long-service-name-for-testing")

        name = get_storage_account_name(config)

        assert len(name) == 24
        assert name == "slswusdevareallylongserv"

    @given(service=service_name_strategy, region=region_strategy)
    def test_generated_names_are_valid(self, service: str, region: str):
        """Test that generated names only use lower-case letters and digits."""
        config = DeploymentConfig(service=service, region=region)

        name = get_storage_account_name(config)

        assert re.fullmatch(r"[a-z0-9]{3,24}", name)
        assert name.startswith("sls")

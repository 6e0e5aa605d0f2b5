"""
Naming conventions shared by deployment workflows.

Region, stage, resource group and storage account names are derived from the
deployment configuration. Command-line options win over configured values,
which win over the defaults in :mod:`deployment_storage.constants`.

Example:
    >>> config = DeploymentConfig(service="my-app")
    >>> get_resource_group_name(config)
    'my-app-westus-dev-rg'
    >>> get_storage_account_name(config)
    'slswusdevmyapp'
"""

import re
from typing import Dict, Optional

from pydantic import BaseModel

from deployment_storage.constants import DEFAULT_REGION, DEFAULT_STAGE

STORAGE_ACCOUNT_PREFIX = "sls"
STORAGE_ACCOUNT_MAX_LENGTH = 24

_REGION_WORDS = {
    "north": "n",
    "south": "s",
    "east": "e",
    "west": "w",
    "central": "c",
}


class DeploymentConfig(BaseModel):
    """Deployment identity used to derive Azure resource names.

    Attributes:
        service: The deployed service name.
        region: Azure region; defaults to ``DEFAULT_REGION``.
        stage: Deployment stage; defaults to ``DEFAULT_STAGE``.
        resource_group: Explicit resource group name.
        storage_account: Explicit storage account name.
        subscription_id: Azure subscription holding the storage account.
    """

    service: str
    region: Optional[str] = None
    stage: Optional[str] = None
    resource_group: Optional[str] = None
    storage_account: Optional[str] = None
    subscription_id: Optional[str] = None


def get_region(
    config: DeploymentConfig, options: Optional[Dict[str, str]] = None
) -> str:
    return (options or {}).get("region") or config.region or DEFAULT_REGION


def get_stage(
    config: DeploymentConfig, options: Optional[Dict[str, str]] = None
) -> str:
    return (options or {}).get("stage") or config.stage or DEFAULT_STAGE


def get_resource_group_name(
    config: DeploymentConfig, options: Optional[Dict[str, str]] = None
) -> str:
    """Resolve the resource group, falling back to ``{service}-{region}-{stage}-rg``."""
    if (options or {}).get("resourceGroup"):
        return options["resourceGroup"]
    if config.resource_group:
        return config.resource_group
    region = get_region(config, options)
    stage = get_stage(config, options)
    return f"{config.service}-{region}-{stage}-rg"


def shorten_region(region: str) -> str:
    """Abbreviate compass words in a region name, e.g. ``eastus2`` -> ``eus2``."""
    short = region.lower()
    for word, letter in _REGION_WORDS.items():
        short = short.replace(word, letter)
    return short


def get_storage_account_name(
    config: DeploymentConfig, options: Optional[Dict[str, str]] = None
) -> str:
    """
    Resolve the storage account name for a deployment.

    Storage account names must be 3-24 lower-case letters and digits, so the
    generated name is sanitized and truncated.

    Args:
        config: Deployment configuration.
        options: Command-line overrides for region and stage.

    Returns:
        str: The storage account name.
    """
    if config.storage_account:
        return config.storage_account

    region = shorten_region(get_region(config, options))
    stage = get_stage(config, options)[:3]
    name = f"{STORAGE_ACCOUNT_PREFIX}{region}{stage}{config.service}".lower()
    return re.sub(r"[^a-z0-9]", "", name)[:STORAGE_ACCOUNT_MAX_LENGTH]

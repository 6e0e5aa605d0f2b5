import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Azure Identity Constants
AZURE_SUBSCRIPTION_ID = os.getenv("AZURE_SUBSCRIPTION_ID")
AZURE_TENANT_ID = os.getenv("AZURE_TENANT_ID")
AZURE_CLIENT_ID = os.getenv("AZURE_CLIENT_ID")
AZURE_CLIENT_SECRET = os.getenv("AZURE_CLIENT_SECRET")

# Blob Storage Constants
AZURE_STORAGE_ENDPOINT_SUFFIX = os.getenv(
    "AZURE_STORAGE_ENDPOINT_SUFFIX", "blob.core.windows.net"
)
DOWNLOAD_BLOCK_SIZE = int(
    os.getenv("AZURE_STORAGE_DOWNLOAD_BLOCK_SIZE", 4 * 1024 * 1024)  # 4 MiB
)
DOWNLOAD_PARALLELISM = int(os.getenv("AZURE_STORAGE_DOWNLOAD_PARALLELISM", "20"))
DOWNLOAD_TIMEOUT = timedelta(
    seconds=int(os.getenv("AZURE_STORAGE_DOWNLOAD_TIMEOUT", 30 * 60))  # 30 minutes
)
SAS_EXPIRY_MINUTES = int(
    os.getenv("AZURE_STORAGE_SAS_EXPIRY_MINUTES", 365 * 24 * 60)  # 1 year
)

# Deployment Naming Constants
DEFAULT_REGION = os.getenv("DEPLOYMENT_DEFAULT_REGION", "westus")
DEFAULT_STAGE = os.getenv("DEPLOYMENT_DEFAULT_STAGE", "dev")

# Logger Constants
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

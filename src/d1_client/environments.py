"""
Coordinating Node Environments

Maps environment keys to Coordinating Node service URLs.
"""

from typing import Mapping, Optional

from d1_client.exceptions import D1ConfigurationError

# Default API version appended to the CN URL
DEFAULT_API_VERSION = 2

CN_ENVIRONMENTS = {
    "PROD": "https://cn.dataone.org/cn",
    "STAGING": "https://cn-stage.test.dataone.org/cn",
    "STAGING2": "https://cn-stage-2.test.dataone.org/cn",
    "SANDBOX": "https://cn-sandbox.test.dataone.org/cn",
    "SANDBOX2": "https://cn-sandbox-2.test.dataone.org/cn",
    "DEV": "https://cn-dev.test.dataone.org/cn",
    "DEV2": "https://cn-dev-2.test.dataone.org/cn",
}


def get_base_url(
    cn: str,
    version: int = DEFAULT_API_VERSION,
    environments: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Resolve a CN environment to its versioned base URL.

    Args:
        cn: Environment key, e.g. "PROD"
        version: DataONE API version
        environments: Table to resolve against (default: CN_ENVIRONMENTS)

    Returns:
        Base URL such as https://cn.dataone.org/cn/v2

    Raises:
        D1ConfigurationError: If the environment is not recognized
    """
    table = CN_ENVIRONMENTS if environments is None else environments
    cn_url = table.get(cn)
    if not cn_url:
        raise D1ConfigurationError(cn)
    return f"{cn_url.rstrip('/')}/v{version}"

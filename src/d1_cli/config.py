"""
CLI Configuration

Handles configuration loading and management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from d1_client.environments import CN_ENVIRONMENTS, DEFAULT_API_VERSION


# Default config locations
DEFAULT_CONFIG_PATHS = [
    Path.home() / ".d1" / "config.yaml",
    Path.home() / ".d1" / "config.yml",
    Path("/etc/d1/config.yaml"),
    Path("d1_config.yaml"),
]


@dataclass
class ServiceConfig:
    """Coordinating Node service configuration."""
    environment: str = "PROD"
    version: int = DEFAULT_API_VERSION
    timeout: float = 30.0
    base_url: Optional[str] = None


@dataclass
class CLIConfig:
    """Complete CLI configuration."""
    service: ServiceConfig = field(default_factory=ServiceConfig)
    environments: Dict[str, str] = field(default_factory=lambda: dict(CN_ENVIRONMENTS))
    profile: str = "default"

    @classmethod
    def from_dict(cls, data: dict, profile: str = "default") -> "CLIConfig":
        """
        Create config from dictionary.

        Args:
            data: Configuration dictionary
            profile: Profile name to use

        Returns:
            CLIConfig instance
        """
        # Get profile-specific config or use root
        if "profiles" in data and profile in data["profiles"]:
            profile_data = data["profiles"][profile]
        else:
            profile_data = data

        service_data = profile_data.get("service") or {}
        service = ServiceConfig(
            environment=service_data.get("environment", "PROD"),
            version=int(service_data.get("version", DEFAULT_API_VERSION)),
            timeout=float(service_data.get("timeout", 30.0)),
            base_url=service_data.get("base_url"),
        )

        # Extra environments are shared by all profiles
        environments = dict(CN_ENVIRONMENTS)
        environments.update(data.get("environments") or {})
        environments.update(profile_data.get("environments") or {})

        return cls(
            service=service,
            environments=environments,
            profile=profile,
        )

    @classmethod
    def from_file(cls, path: Path, profile: str = "default") -> "CLIConfig":
        """
        Load config from YAML file.

        Args:
            path: Path to config file
            profile: Profile name to use

        Returns:
            CLIConfig instance
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {}, profile)

    @classmethod
    def find_and_load(cls, profile: str = "default") -> Optional["CLIConfig"]:
        """
        Find and load config from default locations.

        Args:
            profile: Profile name to use

        Returns:
            CLIConfig instance or None if not found
        """
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path, profile)
        return None


def create_sample_config() -> str:
    """
    Generate sample configuration YAML.

    Returns:
        Sample config as YAML string
    """
    return """# DataONE Client Configuration
# Copy to ~/.d1/config.yaml

# Default profile
service:
  environment: PROD
  version: 2
  timeout: 30

# Additional environments, merged over the built-in table
# environments:
#   LOCAL: http://localhost:8080/cn

# Multiple profiles example
profiles:
  staging:
    service:
      environment: STAGING

  sandbox:
    service:
      environment: SANDBOX
      timeout: 60
"""

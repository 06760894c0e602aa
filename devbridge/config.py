"""Configuration management for devbridge."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from ruamel.yaml import YAML

from .adb.client import ADBClient

DEFAULT_CONFIG_PATH = Path.home() / ".config/devbridge/config.yaml"


class BridgeConfig(BaseModel):
    """Main configuration for devbridge."""

    adb_path: str = Field(default="adb", description="Path to ADB binary")
    command_timeout: int = Field(default=30, gt=0, description="Timeout for one adb command in seconds")
    command_retries: int = Field(default=3, ge=1, description="Attempts made when a command times out")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Also write debug logs to this file")
    boot_timeout: float = Field(default=120.0, gt=0, description="Seconds to wait for a device to boot")
    boot_poll_interval: float = Field(default=1.0, gt=0, description="Seconds between boot checks")

    model_config = ConfigDict(validate_assignment=True)

    def create_client(self) -> ADBClient:
        """Build an ADB client from these settings."""
        return ADBClient(
            adb_path=self.adb_path,
            timeout=self.command_timeout,
            retries=self.command_retries,
        )


def load_config(config_path: Optional[Path] = None) -> BridgeConfig:
    """Load configuration from file or create default."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r") as f:
            data = yaml.load(f) or {}
        return BridgeConfig(**data)
    else:
        config = BridgeConfig()
        save_config(config, config_path)
        return config


def save_config(config: BridgeConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(mode="json"), f)

"""Deployment settings shared by all components."""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """File locations and switches for one appliance.

    Every field can be overridden by a DM_<FIELD> environment variable,
    e.g. DM_DEVICES_DIR=/data/devices.d or DM_REBOOT_TEST_MODE=yes.
    Passed explicitly to each service at construction time.
    """

    model_config = SettingsConfigDict(env_prefix="DM_", extra="ignore")

    devices_path: Path = Field(
        Path("/opt/dm/devices.json"), description="Device manager identity document"
    )
    properties_path: Path = Field(
        Path("/opt/dm/config.properties"), description="Broker properties file"
    )
    devices_dir: Path = Field(
        Path("/opt/dm/devices.d"), description="Directory of per-device JSON documents"
    )
    interfaces_path: Path = Field(
        Path("/etc/network/interfaces"), description="Host network interfaces file"
    )
    reboot_trigger_path: Path = Field(
        Path("/opt/dm/.reboot-trigger"), description="Sentinel consumed by the host watcher"
    )
    reboot_test_mode: bool = Field(
        False, description="Log reboot requests instead of writing the sentinel"
    )
    parity_values: Annotated[tuple[str, ...], NoDecode] = Field(
        ("N", "E", "O"), min_length=1, description="Accepted serial parity values (comma-separated in env)"
    )
    log_file: str = Field("./logs/dm-config.log", description="Rotating log file")
    log_level: LogLevel = Field("INFO", description="Logging level name")
    host: str = Field("0.0.0.0", description="HTTP bind address")
    port: int = Field(8080, ge=1, le=65535, description="HTTP port")

    @field_validator("parity_values", mode="before")
    @classmethod
    def split_parity_values(cls, v):
        """Accept a comma-separated string as well as a sequence."""
        if isinstance(v, str):
            return tuple(p.strip() for p in v.split(",") if p.strip())
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        """Level names are case-insensitive."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

"""Network configuration service for the host interfaces file."""

import logging
from pathlib import Path
from typing import Any, Callable

import psutil

from dmconfig.models.errors import ConfigIOError, ConfigValidationError, NotFoundError
from dmconfig.models.network import NetworkInterfaceConfig
from dmconfig.models.settings import Settings
from dmconfig.services.device_schema import as_text
from dmconfig.services.reboot import RebootTrigger
from dmconfig.utils.interfaces import (
    FALLBACK_INTERFACE,
    METHODS,
    generate_interfaces,
    parse_interfaces,
)
from dmconfig.utils.validation import Validators

# Bridges, veth pairs, docker0, tun devices etc. live here on Linux
SYS_VIRTUAL_NET = Path("/sys/devices/virtual/net")


def _is_virtual(name: str) -> bool:
    return ":" in name or (SYS_VIRTUAL_NET / name).exists()


def detect_network_interface() -> str:
    """First non-loopback, non-virtual interface that is up.

    An interface whose state cannot be read is skipped.

    Returns:
        Interface name, or eth0 when detection fails or finds nothing
    """
    logger = logging.getLogger("dmconfig.network")
    try:
        stats = psutil.net_if_stats()
    except (OSError, psutil.Error) as e:
        logger.warning(f"Interface detection failed, using {FALLBACK_INTERFACE}: {e}")
        return FALLBACK_INTERFACE

    for name, stat in stats.items():
        try:
            if not stat.isup or "loopback" in stat.flags.split(","):
                continue
            if _is_virtual(name):
                continue
        except OSError as e:
            logger.warning(f"Skipping interface {name}: {e}")
            continue
        return name

    logger.info(f"No usable interface found, using {FALLBACK_INTERFACE}")
    return FALLBACK_INTERFACE


class NetworkConfigService:
    """Reads and writes the primary interface stanza, then requests a reboot.

    The interface name written is always the live detected one; any
    client-supplied name is ignored.
    """

    def __init__(
        self,
        settings: Settings,
        validators: Validators,
        reboot_trigger: RebootTrigger,
        detect_interface: Callable[[], str] = detect_network_interface,
    ):
        """Initialize network config service.

        Args:
            settings: Holds the interfaces file path
            validators: Field rule set (IPv4 checks)
            reboot_trigger: Chained after every successful save
            detect_interface: Returns the live primary interface name
        """
        self.logger = logging.getLogger("dmconfig.network")
        self.interfaces_path = Path(settings.interfaces_path)
        self.validators = validators
        self.reboot_trigger = reboot_trigger
        self.detect_interface = detect_interface

    def get_network_config(self) -> NetworkInterfaceConfig:
        """Parse the current interfaces file.

        Raises:
            NotFoundError: If the file does not exist
            ConfigIOError: If the file cannot be read
        """
        if not self.interfaces_path.exists():
            raise NotFoundError(f"File not found: {self.interfaces_path}")
        try:
            content = self.interfaces_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(
                f"Failed to read {self.interfaces_path}: {e}", path=str(self.interfaces_path)
            ) from e
        return parse_interfaces(content, default_interface=self.detect_interface())

    def save_network_config(self, update: dict[str, Any]) -> NetworkInterfaceConfig:
        """Validate, write the interfaces file, then trigger a reboot.

        The file write commits before the trigger runs; a trigger failure
        does not roll the file back.

        Args:
            update: method/address/netmask/gateway; interface is ignored

        Returns:
            Configuration as written

        Raises:
            ConfigValidationError: If method or a non-empty address is invalid
            ConfigIOError: If the interfaces file cannot be written
            RebootTriggerError: If the file was written but the trigger failed
        """
        values = {key: as_text(update.get(key)) for key in ("method", "address", "netmask", "gateway")}
        values["method"] = values["method"] or "static"
        if values["method"] not in METHODS:
            self._reject("method", "Invalid method: must be static or dhcp")

        for field, label in (("address", "IP address"), ("netmask", "netmask"), ("gateway", "gateway")):
            if values[field] and not self.validators.validate_ipv4(values[field]):
                self._reject(field, f"Invalid {label}")

        requested = as_text(update.get("interface"))
        values["interface"] = self.detect_interface()
        if requested and requested != values["interface"]:
            self.logger.info(
                f"Ignoring client interface {requested}, using detected {values['interface']}"
            )

        config = NetworkInterfaceConfig(**values)

        try:
            self.interfaces_path.write_text(generate_interfaces(config), encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(
                f"Failed to write {self.interfaces_path}: {e}", path=str(self.interfaces_path)
            ) from e
        self.logger.info(
            f"Saved network config: interface={config.interface}, method={config.method}"
        )

        self.reboot_trigger.trigger()
        return config

    def _reject(self, field: str, message: str) -> None:
        self.logger.warning(f"Validation failed for {field}: {message}")
        raise ConfigValidationError(field, message)

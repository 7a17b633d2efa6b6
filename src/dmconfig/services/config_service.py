"""Configuration service for identity, broker and per-device documents."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from dmconfig.models.errors import ConfigValidationError, UnknownDeviceError
from dmconfig.models.settings import Settings
from dmconfig.services.device_schema import DeviceSchemaTransformer, as_text
from dmconfig.services.file_store import FileStore
from dmconfig.utils.validation import Validators

MQTT_URL_KEY = "fi.observis.sas.mqtt.url"
MQTT_USERNAME_KEY = "fi.observis.sas.mqtt.username"
MQTT_PASSWORD_KEY = "fi.observis.sas.mqtt.password"

SIMPLE_BROKER_KEY = "mqtt.broker"
SIMPLE_PORT_KEY = "mqtt.port"
SIMPLE_USERNAME_KEY = "mqtt.username"
SIMPLE_PASSWORD_KEY = "mqtt.password"

DEFAULT_MQTT_URL = "tcp://192.168.1.100:1883"
DEFAULT_MQTT_PORT = "1883"
MQTT_URL_SCHEME = "tcp://"


def split_mqtt_url(mqtt_url: Optional[str]) -> tuple[str, str]:
    """Best-effort split of tcp://host:port into (host, port).

    Malformed input yields ("", "1883") rather than an error.
    """
    if not mqtt_url or not mqtt_url.startswith(MQTT_URL_SCHEME):
        return "", DEFAULT_MQTT_PORT
    parts = mqtt_url[len(MQTT_URL_SCHEME):].split(":")
    broker = parts[0]
    port = parts[1] if len(parts) > 1 and parts[1] else DEFAULT_MQTT_PORT
    return broker, port


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(as_text(value).strip())
    except ValueError:
        return None


class ConfigService:
    """Loads, validates and saves the appliance's configuration files.

    All validation failures are raised from here as ConfigValidationError;
    nothing is written when validation fails.
    """

    def __init__(
        self,
        settings: Settings,
        file_store: FileStore,
        validators: Validators,
        transformer: DeviceSchemaTransformer,
    ):
        """Initialize config service.

        Args:
            settings: Paths to the managed files
            file_store: Raw JSON/properties I/O
            validators: Field rule set
            transformer: Nested <-> simplified device schema mapping
        """
        self.logger = logging.getLogger("dmconfig.config_service")
        self.settings = settings
        self.file_store = file_store
        self.validators = validators
        self.transformer = transformer

        v = validators
        serial_rules = [
            ("address", v.validate_serial_port, "Invalid serial port address"),
            ("speed", v.validate_baud_rate, "Invalid baud rate"),
            ("serialPortType", v.validate_serial_port_type, "Invalid serial port type"),
            ("parity", v.validate_parity, "Invalid parity"),
            ("bits", v.validate_data_bits, "Invalid data bits"),
            ("stopBits", v.validate_stop_bits, "Invalid stop bits"),
        ]
        ip_rule = ("address", v.validate_ipv4, "Invalid IP address")
        port_rule = (
            "portNumber",
            lambda value: v.validate_port_number(_parse_int(value)),
            "Invalid port number: must be 1-65535",
        )
        # Device identifier (upper case) -> field rules
        self.device_rules: dict[str, list[tuple[str, Callable[[Any], bool], str]]] = {
            "IBAC": serial_rules,
            "WXT53X": serial_rules,
            "S900": [ip_rule, port_rule],
            "ORITESTGTDB": [ip_rule],
        }

    # ------------------------------------------------------------------
    # Device manager identity (devices.json)
    # ------------------------------------------------------------------

    def get_device_manager_identity(self) -> dict:
        """Read the identity document as stored."""
        return self.file_store.read_json(self.settings.devices_path)

    def save_device_manager_identity(self, document: dict) -> None:
        """Validate and overwrite the identity document in full.

        Raises:
            ConfigValidationError: If deviceManagerKey or deviceManagerName is invalid
        """
        key = document.get("deviceManagerKey")
        if not self.validators.validate_device_manager_key(key):
            self._reject(
                "deviceManagerKey",
                "Invalid deviceManagerKey: must be max 20 chars, valid MQTT topic characters only",
            )

        name = document.get("deviceManagerName")
        if not self.validators.validate_device_manager_name(name):
            self._reject("deviceManagerName", "Invalid deviceManagerName: must be max 50 chars")

        self.file_store.write_json(self.settings.devices_path, document)
        self.logger.info(f"Saved device manager identity: key={key}")

    # ------------------------------------------------------------------
    # Broker properties (config.properties)
    # ------------------------------------------------------------------

    def get_broker_properties(self) -> dict[str, str]:
        """Read the full property set."""
        return self.file_store.read_properties(self.settings.properties_path)

    def get_simplified_broker_properties(self) -> dict[str, str]:
        """Broker settings in the mqtt.* shape used by the UI."""
        properties = self.get_broker_properties()
        broker, port = split_mqtt_url(properties.get(MQTT_URL_KEY, DEFAULT_MQTT_URL))
        return {
            SIMPLE_BROKER_KEY: broker,
            SIMPLE_PORT_KEY: port,
            SIMPLE_USERNAME_KEY: properties.get(MQTT_USERNAME_KEY, ""),
            SIMPLE_PASSWORD_KEY: properties.get(MQTT_PASSWORD_KEY, ""),
        }

    def save_broker_properties(self, update: dict[str, Any]) -> None:
        """Merge an update into the existing property set and write it.

        Two shapes are accepted. With both mqtt.broker and mqtt.port present
        the broker URL is rewritten as tcp://{broker}:{port} and the
        username/password are changed only when non-empty. Any other shape
        is merged key by key. Keys not in the update are preserved.

        Raises:
            ConfigValidationError: If broker is not IPv4 or port is out of range
            NotFoundError: If the properties file does not exist
        """
        if SIMPLE_BROKER_KEY in update and SIMPLE_PORT_KEY in update:
            broker = as_text(update[SIMPLE_BROKER_KEY])
            port = as_text(update[SIMPLE_PORT_KEY]).strip()
            if not self.validators.validate_ipv4(broker):
                self._reject(SIMPLE_BROKER_KEY, "Invalid MQTT broker IP address")
            if not self.validators.validate_port_number(_parse_int(port)):
                self._reject(SIMPLE_PORT_KEY, "Invalid MQTT port number")

            properties = self.get_broker_properties()
            properties[MQTT_URL_KEY] = f"{MQTT_URL_SCHEME}{broker}:{port}"

            username = as_text(update.get(SIMPLE_USERNAME_KEY))
            password = as_text(update.get(SIMPLE_PASSWORD_KEY))
            if username:
                properties[MQTT_USERNAME_KEY] = username
            if password:
                properties[MQTT_PASSWORD_KEY] = password
            self.logger.info(f"Updating MQTT broker URL to {properties[MQTT_URL_KEY]}")
        else:
            for key, value in update.items():
                if value is None or isinstance(value, (dict, list)):
                    self._reject(str(key), f"Invalid value for {key}: must be a string, number or boolean")
            properties = self.get_broker_properties()
            properties.update({str(k): as_text(v) for k, v in update.items()})
            self.logger.info(f"Updating {len(update)} properties directly")

        self.file_store.write_properties(self.settings.properties_path, properties)

    # ------------------------------------------------------------------
    # Per-device documents (devices.d/<DEVICE>.json)
    # ------------------------------------------------------------------

    def device_path(self, device_name: str) -> Path:
        """Resolve the document path for a known device.

        Raises:
            UnknownDeviceError: If the identifier has no rules
        """
        if device_name.upper() not in self.device_rules:
            raise UnknownDeviceError(device_name)
        return Path(self.settings.devices_dir) / f"{device_name}.json"

    def get_device_config(self, device_name: str) -> dict:
        """Read a device document and return its simplified view.

        Raises:
            UnknownDeviceError: If the identifier is not a known device
            NotFoundError: If the document does not exist
        """
        nested = self.file_store.read_json(self.device_path(device_name))
        return self.transformer.to_simplified(nested)

    def save_device_config(self, device_name: str, simplified: dict) -> None:
        """Validate a simplified update, merge it into the nested document, write.

        Raises:
            UnknownDeviceError: If the identifier is not a known device
            ConfigValidationError: If any present field violates its rule
            NotFoundError: If the existing document does not exist
        """
        self.validate_device_config(device_name, simplified)

        path = self.device_path(device_name)
        existing = self.file_store.read_json(path)
        merged = self.transformer.merge_into_nested(existing, simplified)
        self.file_store.write_json(path, merged)
        self.logger.info(f"Saved device config for {device_name}")

    def validate_device_config(self, device_name: str, simplified: dict) -> None:
        """Apply the generic name rule and the device's own field rules.

        Raises:
            UnknownDeviceError: If the identifier is not a known device
            ConfigValidationError: On the first violated rule
        """
        if "name" in simplified:
            if not self.validators.validate_device_name(as_text(simplified["name"])):
                self._reject("name", "Invalid device name: must be max 50 chars")

        rules = self.device_rules.get(device_name.upper())
        if rules is None:
            raise UnknownDeviceError(device_name)

        for field, check, message in rules:
            if field in simplified and not check(as_text(simplified[field])):
                self._reject(field, message)

    def _reject(self, field: str, message: str) -> None:
        self.logger.warning(f"Validation failed for {field}: {message}")
        raise ConfigValidationError(field, message)

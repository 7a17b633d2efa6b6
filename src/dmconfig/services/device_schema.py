"""Conversion between on-disk nested device documents and the flat UI view."""

import copy
from typing import Any

SERIAL_CONFIG_KEY = "serialDeviceConfiguration"
NETWORK_CONFIG_KEY = "networkDeviceConfiguration"

SERIAL_FIELDS = ("address", "speed", "bits", "stopBits", "parity", "serialPortType", "name")
NETWORK_FIELDS = ("address", "portNumber", "name")

# Serial fields written back as integers when the text parses
INTEGER_FIELDS = ("speed", "bits", "stopBits")


def as_text(value: Any, default: str = "") -> str:
    """Render a JSON scalar as text (true/false for booleans)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return default
    return str(value)


def as_bool(value: Any, default: bool = True) -> bool:
    """Interpret a JSON scalar as a boolean, falling back to default."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default


def _as_int_or_text(value: Any) -> Any:
    text = as_text(value)
    try:
        return int(text)
    except ValueError:
        return text


class DeviceSchemaTransformer:
    """Projects nested device documents to the simplified schema and back.

    The wrapper sub-object present in the nested document selects the
    family: serialDeviceConfiguration (IBAC, WXT53X) or
    networkDeviceConfiguration (S900, ORITESTGTDB). Documents with neither
    wrapper pass through unchanged.
    """

    def to_simplified(self, nested: dict) -> dict:
        """Extract the user-editable fields from a nested document.

        Args:
            nested: Full on-disk device document

        Returns:
            Flat document; absent text fields become "" and enabled
            defaults to True
        """
        if SERIAL_CONFIG_KEY in nested:
            return self._project(nested[SERIAL_CONFIG_KEY], SERIAL_FIELDS)
        if NETWORK_CONFIG_KEY in nested:
            return self._project(nested[NETWORK_CONFIG_KEY], NETWORK_FIELDS)
        return nested

    def merge_into_nested(self, existing: dict, simplified: dict) -> dict:
        """Overlay simplified fields onto a copy of the nested document.

        Only keys present in simplified are written; everything else in the
        nested document is preserved. speed, bits and stopBits are stored
        as integers when they parse, otherwise as the original text.

        Args:
            existing: Current on-disk document (not modified)
            simplified: Flat update from the UI

        Returns:
            Merged document, or simplified itself when existing has no wrapper
        """
        result = copy.deepcopy(existing)

        if SERIAL_CONFIG_KEY in result:
            self._overlay(result[SERIAL_CONFIG_KEY], simplified, SERIAL_FIELDS)
        elif NETWORK_CONFIG_KEY in result:
            self._overlay(result[NETWORK_CONFIG_KEY], simplified, NETWORK_FIELDS)
        else:
            return simplified

        return result

    @staticmethod
    def _project(config: Any, fields: tuple[str, ...]) -> dict:
        config = config if isinstance(config, dict) else {}
        simplified = {field: as_text(config.get(field)) for field in fields}
        simplified["enabled"] = as_bool(config.get("enabled"), default=True)
        return simplified

    @staticmethod
    def _overlay(config: dict, simplified: dict, fields: tuple[str, ...]) -> None:
        for field in fields:
            if field not in simplified:
                continue
            if field in INTEGER_FIELDS:
                config[field] = _as_int_or_text(simplified[field])
            else:
                config[field] = as_text(simplified[field])
        if "enabled" in simplified:
            config["enabled"] = as_bool(simplified["enabled"], default=False)

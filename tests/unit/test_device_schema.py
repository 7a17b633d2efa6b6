"""Unit tests for DeviceSchemaTransformer."""

import copy

import pytest

from dmconfig.services.device_schema import DeviceSchemaTransformer, as_bool, as_text


@pytest.fixture
def transformer():
    return DeviceSchemaTransformer()


@pytest.mark.unit
class TestToSimplified:
    """Nested -> simplified projection."""

    def test_serial_document(self, transformer, serial_device_doc):
        simplified = transformer.to_simplified(serial_device_doc)

        assert simplified == {
            "address": "/dev/ttyS0",
            "speed": "9600",
            "bits": "8",
            "stopBits": "1",
            "parity": "N",
            "serialPortType": "RS232",
            "name": "IBAC sensor",
            "enabled": True,
        }

    def test_network_document(self, transformer, network_device_doc):
        simplified = transformer.to_simplified(network_device_doc)

        assert simplified == {
            "address": "192.168.26.20",
            "portNumber": "502",
            "name": "S900 analyser",
            "enabled": False,
        }

    def test_missing_fields_default(self, transformer):
        simplified = transformer.to_simplified({"networkDeviceConfiguration": {}})

        assert simplified == {"address": "", "portNumber": "", "name": "", "enabled": True}

    def test_document_without_wrapper_passes_through(self, transformer):
        document = {"custom": {"threshold": 3}}

        assert transformer.to_simplified(document) is document


@pytest.mark.unit
class TestMergeIntoNested:
    """Simplified -> nested merge."""

    def test_fields_absent_from_update_are_preserved(self, transformer, serial_device_doc):
        merged = transformer.merge_into_nested(serial_device_doc, {"parity": "E"})

        config = merged["serialDeviceConfiguration"]
        assert config["parity"] == "E"
        assert config["timeoutMs"] == 2000
        assert config["speed"] == 9600
        assert merged["measurementInterval"] == 60
        assert merged["deviceType"] == "IBAC"

    def test_existing_document_is_not_mutated(self, transformer, serial_device_doc):
        original = copy.deepcopy(serial_device_doc)

        transformer.merge_into_nested(serial_device_doc, {"name": "renamed"})

        assert serial_device_doc == original

    def test_numeric_strings_become_integers(self, transformer, serial_device_doc):
        merged = transformer.merge_into_nested(
            serial_device_doc, {"speed": "115200", "bits": "7", "stopBits": "2"}
        )

        config = merged["serialDeviceConfiguration"]
        assert config["speed"] == 115200
        assert config["bits"] == 7
        assert config["stopBits"] == 2

    def test_unparseable_numeric_field_kept_as_text(self, transformer, serial_device_doc):
        merged = transformer.merge_into_nested(serial_device_doc, {"speed": "fast"})

        assert merged["serialDeviceConfiguration"]["speed"] == "fast"

    def test_network_port_number_stored_as_text(self, transformer, network_device_doc):
        merged = transformer.merge_into_nested(network_device_doc, {"portNumber": 503})

        config = merged["networkDeviceConfiguration"]
        assert config["portNumber"] == "503"
        assert config["protocol"] == "modbus-tcp"
        assert merged["alarms"] == {"high": 80, "low": 10}

    def test_enabled_flag(self, transformer, network_device_doc):
        merged = transformer.merge_into_nested(network_device_doc, {"enabled": "true"})

        assert merged["networkDeviceConfiguration"]["enabled"] is True

    def test_unknown_simplified_keys_are_ignored(self, transformer, network_device_doc):
        merged = transformer.merge_into_nested(network_device_doc, {"speed": "9600"})

        assert "speed" not in merged["networkDeviceConfiguration"]

    def test_no_wrapper_replaces_document(self, transformer):
        update = {"threshold": 5}

        assert transformer.merge_into_nested({"threshold": 3, "other": 1}, update) == update


@pytest.mark.unit
class TestScalarHelpers:
    """as_text / as_bool."""

    def test_as_text(self):
        assert as_text(None) == ""
        assert as_text(9600) == "9600"
        assert as_text(True) == "true"
        assert as_text({"nested": 1}) == ""

    def test_as_bool(self):
        assert as_bool(None) is True
        assert as_bool(None, default=False) is False
        assert as_bool("FALSE") is False
        assert as_bool(0) is False
        assert as_bool("maybe", default=False) is False

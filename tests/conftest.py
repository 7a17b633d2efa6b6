"""Global pytest fixtures and configuration."""

import json
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dmconfig.models.settings import Settings  # noqa: E402
from dmconfig.services.config_service import ConfigService  # noqa: E402
from dmconfig.services.device_schema import DeviceSchemaTransformer  # noqa: E402
from dmconfig.services.file_store import FileStore  # noqa: E402
from dmconfig.utils.validation import Validators  # noqa: E402

SAMPLE_PROPERTIES = (
    "#Mon Jan 01 00:00:00 UTC 2024\n"
    "fi.observis.sas.mqtt.url=tcp://1.2.3.4:1883\n"
    "fi.observis.sas.mqtt.username=dm\n"
    "fi.observis.sas.mqtt.password=secret\n"
    "fi.observis.sas.heartbeat.interval=30\n"
)

SAMPLE_INTERFACES = (
    "auto lo\n"
    "iface lo inet loopback\n"
    "\n"
    "auto enp1s0\n"
    "iface enp1s0 inet static\n"
    "    address 192.168.26.10\n"
    "    netmask 255.255.255.0\n"
    "    gateway 192.168.26.1\n"
)


@pytest.fixture
def serial_device_doc():
    """Nested IBAC document with fields the UI never sees."""
    return {
        "deviceType": "IBAC",
        "serialDeviceConfiguration": {
            "address": "/dev/ttyS0",
            "speed": 9600,
            "bits": 8,
            "stopBits": 1,
            "parity": "N",
            "serialPortType": "RS232",
            "name": "IBAC sensor",
            "enabled": True,
            "timeoutMs": 2000,
        },
        "measurementInterval": 60,
    }


@pytest.fixture
def network_device_doc():
    """Nested S900 document."""
    return {
        "networkDeviceConfiguration": {
            "address": "192.168.26.20",
            "portNumber": "502",
            "name": "S900 analyser",
            "enabled": False,
            "protocol": "modbus-tcp",
        },
        "alarms": {"high": 80, "low": 10},
    }


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every managed file into tmp_path."""
    devices_dir = tmp_path / "devices.d"
    devices_dir.mkdir()
    return Settings(
        devices_path=tmp_path / "devices.json",
        properties_path=tmp_path / "config.properties",
        devices_dir=devices_dir,
        interfaces_path=tmp_path / "interfaces",
        reboot_trigger_path=tmp_path / ".reboot-trigger",
        log_file=str(tmp_path / "logs" / "dm-config.log"),
    )


@pytest.fixture
def populated_settings(settings, serial_device_doc, network_device_doc):
    """Settings whose files already hold realistic content."""
    settings.devices_path.write_text(
        json.dumps({"deviceManagerKey": "DM01", "deviceManagerName": "Field DM"})
    )
    settings.properties_path.write_text(SAMPLE_PROPERTIES)
    (settings.devices_dir / "IBAC.json").write_text(json.dumps(serial_device_doc, indent=2))
    (settings.devices_dir / "WXT53X.json").write_text(
        json.dumps({"serialDeviceConfiguration": {"address": "ttyS1", "speed": 19200}})
    )
    (settings.devices_dir / "S900.json").write_text(json.dumps(network_device_doc, indent=2))
    (settings.devices_dir / "ORITESTGTDB.json").write_text(
        json.dumps({"networkDeviceConfiguration": {"address": "10.1.1.1", "portNumber": 8000}})
    )
    settings.interfaces_path.write_text(SAMPLE_INTERFACES)
    return settings


@pytest.fixture
def config_service(populated_settings):
    """ConfigService wired with real collaborators over tmp files."""
    return ConfigService(
        populated_settings,
        FileStore(),
        Validators(populated_settings.parity_values),
        DeviceSchemaTransformer(),
    )

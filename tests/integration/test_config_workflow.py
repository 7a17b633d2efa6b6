"""Integration tests: full read-modify-write cycles over a temp filesystem."""

import json

import pytest

from dmconfig.models.errors import ConfigValidationError
from dmconfig.models.settings import Settings
from dmconfig.services.config_service import ConfigService
from dmconfig.services.device_schema import DeviceSchemaTransformer
from dmconfig.services.file_store import FileStore
from dmconfig.services.network_config import NetworkConfigService
from dmconfig.services.reboot import RebootTrigger
from dmconfig.utils.validation import Validators


@pytest.mark.integration
class TestConfigWorkflow:
    """UI-style sequences against real files."""

    def test_device_round_trip_preserves_hidden_fields(self, config_service, populated_settings):
        simplified = config_service.get_device_config("IBAC")
        simplified["speed"] = "38400"
        simplified["serialPortType"] = "RS485"

        config_service.save_device_config("IBAC", simplified)

        saved = json.loads((populated_settings.devices_dir / "IBAC.json").read_text())
        assert saved["serialDeviceConfiguration"]["speed"] == 38400
        assert saved["serialDeviceConfiguration"]["bits"] == 8
        assert saved["serialDeviceConfiguration"]["timeoutMs"] == 2000
        assert saved["deviceType"] == "IBAC"
        assert config_service.get_device_config("IBAC")["serialPortType"] == "RS485"

    def test_broker_edit_cycle(self, config_service, populated_settings):
        view = config_service.get_simplified_broker_properties()
        view["mqtt.broker"] = "10.0.0.5"
        view["mqtt.port"] = "1884"

        config_service.save_broker_properties(view)

        assert config_service.get_simplified_broker_properties()["mqtt.broker"] == "10.0.0.5"
        raw = config_service.get_broker_properties()
        assert raw["fi.observis.sas.mqtt.url"] == "tcp://10.0.0.5:1884"
        assert raw["fi.observis.sas.heartbeat.interval"] == "30"

    def test_rejected_save_then_accepted_save(self, config_service, populated_settings):
        path = populated_settings.devices_dir / "S900.json"
        before = path.read_bytes()

        with pytest.raises(ConfigValidationError):
            config_service.save_device_config("S900", {"portNumber": 70000})
        assert path.read_bytes() == before

        config_service.save_device_config("S900", {"portNumber": 1502})
        assert config_service.get_device_config("S900")["portNumber"] == "1502"

    def test_network_save_chains_reboot_trigger(self, populated_settings):
        trigger = RebootTrigger(populated_settings.reboot_trigger_path)
        service = NetworkConfigService(
            populated_settings, Validators(), trigger, detect_interface=lambda: "eth0"
        )

        service.save_network_config(
            {
                "interface": "enp9s9",
                "method": "static",
                "address": "192.168.1.100",
                "netmask": "255.255.255.0",
                "gateway": "192.168.1.1",
            }
        )

        config = service.get_network_config()
        assert config.interface == "eth0"
        assert (config.address, config.netmask, config.gateway) == (
            "192.168.1.100",
            "255.255.255.0",
            "192.168.1.1",
        )
        assert populated_settings.reboot_trigger_path.read_text().startswith("REBOOT_REQUESTED=")

    def test_services_share_injected_settings(self, tmp_path):
        settings = Settings(
            devices_path=tmp_path / "dm.json",
            properties_path=tmp_path / "dm.properties",
            devices_dir=tmp_path,
        )
        service = ConfigService(settings, FileStore(), Validators(), DeviceSchemaTransformer())

        service.save_device_manager_identity({"deviceManagerKey": "K", "deviceManagerName": "N"})

        assert json.loads((tmp_path / "dm.json").read_text()) == {
            "deviceManagerKey": "K",
            "deviceManagerName": "N",
        }

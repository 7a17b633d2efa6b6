"""API route handlers for configuration endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Request

from dmconfig.api.models import SaveRequest, SuccessResponse
from dmconfig.services.config_service import ConfigService
from dmconfig.services.network_config import NetworkConfigService
from dmconfig.services.reboot import RebootTrigger

router = APIRouter(prefix="/api")


def _config_service(request: Request) -> ConfigService:
    return request.app.state.config_service


def _network_service(request: Request) -> NetworkConfigService:
    return request.app.state.network_service


def _reboot_trigger(request: Request) -> RebootTrigger:
    return request.app.state.reboot_trigger


@router.get("/devices")
def get_devices(request: Request):
    """GET /api/devices - Device manager identity document."""
    return _config_service(request).get_device_manager_identity()


@router.post("/save", response_model=SuccessResponse)
def save_config(request: Request, payload: SaveRequest):
    """POST /api/save - Save identity ("devices") or broker ("properties") config."""
    service = _config_service(request)
    if payload.configType == "devices":
        service.save_device_manager_identity(payload.data)
    else:
        service.save_broker_properties(payload.data)
    return SuccessResponse(message="Configuration saved successfully")


@router.get("/config/properties")
def get_config_properties(request: Request):
    """GET /api/config/properties - Broker settings in mqtt.* form."""
    return _config_service(request).get_simplified_broker_properties()


@router.get("/device/{device_name}")
def get_device_config(request: Request, device_name: str):
    """GET /api/device/{device_name} - Simplified device configuration."""
    return _config_service(request).get_device_config(device_name)


@router.post("/device/{device_name}", response_model=SuccessResponse)
def save_device_config(request: Request, device_name: str, config: dict[str, Any] = Body(...)):
    """POST /api/device/{device_name} - Merge a simplified update into the device file."""
    _config_service(request).save_device_config(device_name, config)
    return SuccessResponse(message="Device configuration saved successfully")


@router.post("/reboot", response_model=SuccessResponse)
def reboot(request: Request):
    """POST /api/reboot - Write the reboot trigger."""
    _reboot_trigger(request).trigger()
    return SuccessResponse(message="Reboot initiated")


@router.get("/network")
def get_network_config(request: Request):
    """GET /api/network - Primary interface configuration."""
    return _network_service(request).get_network_config().model_dump()


@router.post("/network", response_model=SuccessResponse)
def save_network_config(request: Request, config: dict[str, Any] = Body(...)):
    """POST /api/network - Save the interfaces file and request a reboot."""
    _network_service(request).save_network_config(config)
    return SuccessResponse(
        message="Network configuration saved successfully. System rebooting..."
    )

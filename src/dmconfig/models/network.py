"""Network interface configuration model."""

from typing import Literal

from pydantic import BaseModel, Field


class NetworkInterfaceConfig(BaseModel):
    """Primary host interface as stored in /etc/network/interfaces."""

    interface: str = Field("eth0", description="Interface name, e.g. eth0")
    method: Literal["static", "dhcp"] = Field("static", description="Address method")
    address: str = Field("", description="IPv4 address (static only)")
    netmask: str = Field("", description="IPv4 netmask (static only)")
    gateway: str = Field("", description="IPv4 gateway, optional")

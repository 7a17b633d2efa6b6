"""Parser and generator for the Debian /etc/network/interfaces format."""

from typing import Optional

from dmconfig.models.network import NetworkInterfaceConfig

FALLBACK_INTERFACE = "eth0"
OPTION_KEYS = ("address", "netmask", "gateway")
METHODS = ("static", "dhcp")

LOOPBACK_PREAMBLE = (
    "# This file describes the network interfaces available on your system\n"
    "# and how to activate them. For more information, see interfaces(5).\n"
    "\n"
    "# The loopback network interface\n"
    "auto lo\n"
    "iface lo inet loopback\n"
    "\n"
)


def parse_interfaces(content: str, default_interface: Optional[str] = None) -> NetworkInterfaceConfig:
    """Extract the primary (first non-loopback "inet") interface stanza.

    Args:
        content: Text of the interfaces file
        default_interface: Name used when the file has no non-loopback stanza

    Returns:
        NetworkInterfaceConfig; method defaults to static and absent options
        to ""
    """
    values = {
        "interface": default_interface or FALLBACK_INTERFACE,
        "method": "static",
        "address": "",
        "netmask": "",
        "gateway": "",
    }

    found = False
    in_block = False
    for raw_line in content.splitlines():
        line = raw_line.strip()
        tokens = line.split()

        if in_block:
            if not line or tokens[0] in ("iface", "auto"):
                # Only the first stanza is read
                break
            if tokens[0] in OPTION_KEYS and len(tokens) > 1:
                values[tokens[0]] = tokens[1]
            continue

        if (
            not found
            and len(tokens) > 2
            and tokens[0] == "iface"
            and tokens[1] != "lo"
            and tokens[2] == "inet"
        ):
            found = True
            in_block = True
            values["interface"] = tokens[1]
            if len(tokens) > 3 and tokens[3] in METHODS:
                values["method"] = tokens[3]

    return NetworkInterfaceConfig(**values)


def generate_interfaces(config: NetworkInterfaceConfig) -> str:
    """Render the interfaces file: loopback stanza, then the primary interface.

    Static stanzas list address, netmask and gateway in that order,
    skipping empty values. dhcp stanzas have no options.
    """
    lines = [
        "# The primary network interface",
        f"auto {config.interface}",
        f"iface {config.interface} inet {config.method}",
    ]
    if config.method == "static":
        for key in OPTION_KEYS:
            value = getattr(config, key)
            if value:
                lines.append(f"    {key} {value}")
    return LOOPBACK_PREAMBLE + "\n".join(lines) + "\n"

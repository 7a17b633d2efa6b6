"""Field validation rules for configuration values.

Every check returns a bool and never raises; None or empty is invalid.
"""

import re
from typing import Iterable, Optional

DEVICE_MANAGER_KEY_MAX_LENGTH = 20
DEVICE_MANAGER_NAME_MAX_LENGTH = 50
DEVICE_NAME_MAX_LENGTH = 50

IPV4_PATTERN = re.compile(
    r"^((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

# MQTT topic level: anything except /, # and +
MQTT_TOPIC_PATTERN = re.compile(r"^[^/#+]+$")

VALID_SERIAL_PORTS = ("ttyS0", "ttyS1", "/dev/ttyS0", "/dev/ttyS1")
VALID_BAUD_RATES = ("9600", "19200", "38400", "57600", "115200")
VALID_SERIAL_PORT_TYPES = ("RS232", "RS485")
VALID_DATA_BITS = ("7", "8")
VALID_STOP_BITS = ("1", "2")
DEFAULT_PARITY_VALUES = ("N", "E", "O")


class Validators:
    """Stateless predicates over primitive values.

    The parity enumeration is the only configurable rule; everything else
    is fixed.
    """

    def __init__(self, parity_values: Optional[Iterable[str]] = None):
        """Initialize validators.

        Args:
            parity_values: Accepted parity values (default N/E/O)
        """
        self.parity_values = tuple(parity_values or DEFAULT_PARITY_VALUES)

    def validate_device_manager_key(self, key: Optional[str]) -> bool:
        """Max 20 chars, usable as a single MQTT topic level."""
        if not key or not isinstance(key, str):
            return False
        if len(key) > DEVICE_MANAGER_KEY_MAX_LENGTH:
            return False
        return MQTT_TOPIC_PATTERN.match(key) is not None

    def validate_device_manager_name(self, name: Optional[str]) -> bool:
        """Max 50 chars, spaces allowed."""
        if not name or not isinstance(name, str):
            return False
        return len(name) <= DEVICE_MANAGER_NAME_MAX_LENGTH

    def validate_ipv4(self, ip: Optional[str]) -> bool:
        """Strict dotted quad with every octet in 0-255."""
        if not ip or not isinstance(ip, str):
            return False
        # fullmatch: "$" would also accept a trailing newline
        return IPV4_PATTERN.fullmatch(ip) is not None

    def validate_port_number(self, port: Optional[int]) -> bool:
        if not isinstance(port, int) or isinstance(port, bool):
            return False
        return 1 <= port <= 65535

    def validate_serial_port(self, port: Optional[str]) -> bool:
        return port in VALID_SERIAL_PORTS

    def validate_baud_rate(self, rate: Optional[str]) -> bool:
        return rate in VALID_BAUD_RATES

    def validate_serial_port_type(self, port_type: Optional[str]) -> bool:
        return port_type in VALID_SERIAL_PORT_TYPES

    def validate_parity(self, parity: Optional[str]) -> bool:
        return parity in self.parity_values

    def validate_data_bits(self, bits: Optional[str]) -> bool:
        return bits in VALID_DATA_BITS

    def validate_stop_bits(self, stop_bits: Optional[str]) -> bool:
        return stop_bits in VALID_STOP_BITS

    def validate_device_name(self, name: Optional[str]) -> bool:
        """Max 50 chars, spaces allowed."""
        if not name or not isinstance(name, str):
            return False
        return len(name) <= DEVICE_NAME_MAX_LENGTH

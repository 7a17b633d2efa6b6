"""Error kinds raised by the configuration services."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure category, used by callers to branch without matching messages.

    validation -> bad field value, nothing written
    not_found  -> missing file or unknown device
    parse      -> malformed on-disk content
    io         -> write/permission failures
    """

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PARSE = "parse"
    IO = "io"


class ConfigError(Exception):
    """Base class for all configuration failures."""

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigValidationError(ConfigError):
    """A field value failed its validation rule."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NotFoundError(ConfigError):
    """Target file does not exist."""

    kind = ErrorKind.NOT_FOUND


class UnknownDeviceError(NotFoundError):
    """Device identifier has no validation rules or config file."""

    def __init__(self, device_name: str):
        super().__init__(f"Unknown device: {device_name}")
        self.device_name = device_name


class ConfigParseError(ConfigError):
    """On-disk document could not be parsed."""

    kind = ErrorKind.PARSE


class ConfigIOError(ConfigError):
    """Read or write failed at the OS level."""

    kind = ErrorKind.IO

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class RebootTriggerError(ConfigIOError):
    """Reboot sentinel could not be written."""

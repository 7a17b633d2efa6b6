"""Reboot trigger: hands configuration apply over to the host watcher."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

from dmconfig.models.errors import RebootTriggerError


class RebootTrigger:
    """Writes the reboot sentinel file consumed by an external watcher.

    The file is never read back here; the watcher owns it once written.
    """

    def __init__(self, trigger_path: Union[str, Path], test_mode: bool = False):
        """Initialize reboot trigger.

        Args:
            trigger_path: Sentinel file location
            test_mode: Only log the request, perform no I/O
        """
        self.logger = logging.getLogger("dmconfig.reboot")
        self.trigger_path = Path(trigger_path)
        self.test_mode = test_mode

    def trigger(self) -> str:
        """Request a reboot.

        Returns:
            ISO 8601 timestamp written to (or logged instead of) the sentinel

        Raises:
            RebootTriggerError: If the sentinel cannot be written
        """
        timestamp = datetime.now().astimezone().isoformat()

        if self.test_mode:
            self.logger.info(f"Reboot simulated (test mode) at {timestamp}")
            return timestamp

        try:
            with open(self.trigger_path, "w", encoding="utf-8") as f:
                f.write(f"REBOOT_REQUESTED={timestamp}\n")
        except OSError as e:
            self.logger.error(f"Failed to write reboot trigger {self.trigger_path}: {e}")
            raise RebootTriggerError(
                f"Failed to write reboot trigger {self.trigger_path}: {e}",
                path=str(self.trigger_path),
            ) from e

        self.logger.info(f"Reboot requested via {self.trigger_path}")
        return timestamp

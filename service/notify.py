"""
Command-based notifier.

Launches an external executable with the notable recording file name as its
only argument. The command runs detached so a slow notification script never
holds up processing of the next interval.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

from magnetophon.capture.writer import RECORDING_SUFFIX
from magnetophon.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class CommandNotifier:
    def __init__(self, command: Optional[str], suffix: str = RECORDING_SUFFIX) -> None:
        self.command = command
        self.suffix = suffix

    def notify(self, notable: str) -> Optional[subprocess.Popen]:
        """
        Launch the notification command for a notable recording.

        Raises:
            NotificationError: If the command cannot be started
        """
        if not self.command:
            logger.warning("No notification command configured; %s not announced", notable)
            return None

        args = [self.command, f"{notable}{self.suffix}"]
        logger.info("Executing %s", " ".join(args))
        try:
            return subprocess.Popen(args)
        except OSError as e:
            raise NotificationError(f"Can't send notification via {self.command}: {e}") from e

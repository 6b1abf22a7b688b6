"""Restart the mail filter through its process supervisor."""

import shlex

from mailkeys.common.logging import get_logger
from mailkeys.common.process import CommandRunner
from mailkeys.common.settings import Settings

logger = get_logger(__name__)


class ServiceReloader:
    """Best-effort restart; a failure is reported but never raised."""

    def __init__(self, settings: Settings, runner: CommandRunner):
        self._settings = settings
        self._runner = runner

    def reload(self) -> bool:
        """
        Restart the configured service.

        Returns:
            True if the supervisor reported success
        """
        service = self._settings.service_name
        argv = shlex.split(self._settings.restart_command.format(service=service))
        try:
            result = self._runner.run(argv)
        except OSError as e:
            logger.warning("Could not restart service", service=service, error=str(e))
            return False

        if not result.ok:
            logger.warning(
                "Could not restart service",
                service=service,
                returncode=result.returncode,
                output=(result.stderr or result.stdout).strip(),
            )
            return False

        logger.info("Restarted service", service=service)
        return True

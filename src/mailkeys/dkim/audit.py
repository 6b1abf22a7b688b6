"""Advisory check that the mail filter can read its new key."""

from mailkeys.common.errors import Advisory, ErrorCode
from mailkeys.common.logging import get_logger
from mailkeys.common.process import CommandRunner
from mailkeys.common.settings import Settings
from mailkeys.dkim.keyspec import KeyArtifactSet

logger = get_logger(__name__)


class PermissionAuditor:
    """Tries to list the key directory and read the private key as the service user."""

    def __init__(self, settings: Settings, runner: CommandRunner):
        self._settings = settings
        self._runner = runner

    def audit(self, artifacts: KeyArtifactSet) -> list[Advisory]:
        checks = [
            (["ls", str(artifacts.key_dir)], f"cannot list {artifacts.key_dir}"),
            (["cat", str(artifacts.private_key_path)], f"cannot read {artifacts.private_key_path}"),
        ]
        user = self._settings.service_user

        advisories = []
        for argv, problem in checks:
            try:
                result = self._runner.run(argv, user=self._settings.effective_user)
                ok = result.ok
            except OSError as e:
                logger.debug("Permission check could not run", argv=argv, error=str(e))
                ok = False
            if not ok:
                message = f"User '{user}' {problem}; rspamd may fail to sign mail"
                logger.warning("Permission check failed", user=user, detail=problem)
                advisories.append(Advisory(ErrorCode.PERMISSION_AUDIT, message))
        return advisories

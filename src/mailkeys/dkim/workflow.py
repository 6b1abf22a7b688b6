"""DKIM provisioning workflow."""

import os
from dataclasses import dataclass, field

from rich.console import Console

from mailkeys.common.errors import Advisory, ErrorCode, MailkeysError
from mailkeys.common.logging import get_logger
from mailkeys.common.process import CommandRunner
from mailkeys.common.settings import Settings
from mailkeys.dkim.audit import PermissionAuditor
from mailkeys.dkim.dns import DnsRecord, DnsRecordFormatter, read_record
from mailkeys.dkim.generator import KeyGenerator
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec
from mailkeys.dkim.reload import ServiceReloader
from mailkeys.dkim.signing_config import ConfigReconciler
from mailkeys.dkim.store import KeyMaterialStore

logger = get_logger(__name__)


@dataclass
class WorkflowResult:
    """Outcome of a successful provisioning run."""

    spec: KeySpec
    artifacts: KeyArtifactSet
    record: DnsRecord
    config_written: bool
    advisories: list[Advisory] = field(default_factory=list)


class DkimWorkflow:
    """
    Provision one DKIM key end to end.

    Steps, each running to completion before the next:
    - check the persistence volume (advisory)
    - clear or refuse existing artifacts
    - generate the key as the service user
    - audit read access (advisory)
    - create the signing config once, reloading rspamd right away
    - derive and show the DNS record
    - restart rspamd (advisory on failure)
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner | None = None,
        console: Console | None = None,
    ):
        runner = runner or CommandRunner()
        self._settings = settings
        self._store = KeyMaterialStore(settings)
        self._generator = KeyGenerator(settings, runner)
        self._auditor = PermissionAuditor(settings, runner)
        self._reconciler = ConfigReconciler(settings)
        self._formatter = DnsRecordFormatter(settings, console)
        self._reloader = ServiceReloader(settings, runner)

    def run(self, spec: KeySpec) -> WorkflowResult:
        """
        Run all steps for ``spec``.

        Raises:
            ArtifactExistsError: If key files exist and overwriting was not requested
            KeyGenerationError: If the generator failed
        """
        advisories = self._check_persistence()

        artifacts = self._store.check_and_prepare(spec)
        self._generator.generate(spec, artifacts)
        advisories.extend(self._auditor.audit(artifacts))

        config_written = self._reconciler.reconcile(spec, artifacts)
        if config_written:
            advisories.extend(self._reload("signing config created"))

        record = self._formatter.format(spec, artifacts)
        advisories.extend(self._reload("key provisioned"))

        logger.info(
            "DKIM key provisioned",
            record=record.name,
            config_written=config_written,
            warnings=len(advisories),
        )
        return WorkflowResult(
            spec=spec,
            artifacts=artifacts,
            record=record,
            config_written=config_written,
            advisories=advisories,
        )

    def show_record(self, spec: KeySpec) -> DnsRecord:
        """
        Show the record of an existing key without touching any file.

        Raises:
            MailkeysError: If no public key exists for ``spec``
            KeyGenerationError: If the public key file holds no complete record
        """
        artifacts = self._store.artifacts_for(spec)
        if not artifacts.public_key_path.exists():
            raise MailkeysError(
                f"No public key found at {artifacts.public_key_path}",
                code=ErrorCode.NOT_FOUND,
            )
        record = read_record(spec, artifacts)
        self._formatter.show(record)
        return record

    def _check_persistence(self) -> list[Advisory]:
        root = self._settings.persistence_root
        if os.path.ismount(root):
            return []
        message = f"{root} is not mounted; generated keys will be lost when the container is recreated"
        logger.warning("Persistence volume not mounted", path=str(root))
        return [Advisory(ErrorCode.NOT_MOUNTED, message)]

    def _reload(self, reason: str) -> list[Advisory]:
        if self._reloader.reload():
            return []
        message = f"Restarting {self._settings.service_name} failed ({reason}); restart it manually"
        return [Advisory(ErrorCode.RELOAD_FAILED, message)]

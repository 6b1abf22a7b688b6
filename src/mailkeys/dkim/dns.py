"""Turn rspamadm's zone-file output into a DNS TXT record body."""

import re
from dataclasses import dataclass

from rich.console import Console

from mailkeys.common.errors import KeyGenerationError
from mailkeys.common.logging import get_logger, level_enabled
from mailkeys.common.ownership import hand_over
from mailkeys.common.settings import Settings
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec

logger = get_logger(__name__)

_QUOTED_RE = re.compile(r'"([^"]*)"')


@dataclass(frozen=True)
class DnsRecord:
    """A TXT record the administrator has to publish."""

    name: str
    text: str


def extract_record_text(zone_output: str) -> str:
    """
    Join every double-quoted segment of ``zone_output``.

    ``"v=DKIM1; k=rsa; " "p=ABC123"`` becomes ``"v=DKIM1; k=rsa; p=ABC123\\n"``.

    Raises:
        KeyGenerationError: If the output has no quoted record or an unterminated quote
    """
    if zone_output.count('"') % 2:
        raise KeyGenerationError("Key generator output ends inside a quoted string", log=zone_output)
    text = "".join(_QUOTED_RE.findall(zone_output)).replace("\r", "").replace("\n", "")
    if not text:
        raise KeyGenerationError("No DKIM record found in key generator output", log=zone_output)
    return text + "\n"


def read_record(spec: KeySpec, artifacts: KeyArtifactSet) -> DnsRecord:
    """Build the record from the public key file of ``spec``."""
    zone_output = artifacts.public_key_path.read_text(encoding="utf-8")
    try:
        text = extract_record_text(zone_output)
    except KeyGenerationError as e:
        raise KeyGenerationError(f"{e} ({artifacts.public_key_path})", log=e.log) from e
    return DnsRecord(name=spec.record_name, text=text)


class DnsRecordFormatter:
    """Writes the flat record next to the public key and shows it to the operator."""

    def __init__(self, settings: Settings, console: Console | None = None):
        self._settings = settings
        self._console = console or Console()

    def format(self, spec: KeySpec, artifacts: KeyArtifactSet) -> DnsRecord:
        """
        Derive the record from the public key file.

        Raises:
            KeyGenerationError: If the public key file holds no complete quoted record
        """
        record = read_record(spec, artifacts)
        artifacts.public_key_dns_path.write_text(record.text, encoding="utf-8")
        hand_over(artifacts.public_key_dns_path, self._settings)
        logger.debug("Wrote DNS record", path=str(artifacts.public_key_dns_path))

        if level_enabled(self._settings.log_level, "info"):
            self.show(record)
        return record

    def show(self, record: DnsRecord) -> None:
        self._console.print(
            f"Here is the content of the TXT DNS record [bold]{record.name}[/bold] "
            "that you need to create:\n",
            highlight=False,
        )
        self._console.print(record.text, end="", markup=False, highlight=False, soft_wrap=True)

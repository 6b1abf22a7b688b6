"""Key generation through the external rspamadm generator."""

import shlex
from dataclasses import dataclass

from mailkeys.common.errors import KeyGenerationError
from mailkeys.common.logging import get_logger
from mailkeys.common.ownership import hand_over
from mailkeys.common.process import CommandResult, CommandRunner
from mailkeys.common.settings import Settings
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec, KeyType

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """
    Result of one generator run.

    rspamadm may exit 0 even though it could not write the private key;
    the real error then only shows up in its log. A run counts as
    successful only when the exit status is 0 and the log carries no
    permission-denied marker.
    """

    returncode: int
    log: str
    permission_denied: bool

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and not self.permission_denied

    @classmethod
    def from_result(cls, result: CommandResult, denied_marker: str) -> "GenerationOutcome":
        return cls(
            returncode=result.returncode,
            log=result.stderr,
            permission_denied=denied_marker in result.stderr,
        )


def build_keygen_command(command: str, spec: KeySpec, artifacts: KeyArtifactSet) -> list[str]:
    """Command line producing the key described by ``spec``."""
    argv = shlex.split(command)
    argv += ["-s", spec.selector, "-d", spec.domain]
    if spec.key_type is KeyType.ED25519:
        argv += ["-t", "ed25519"]
    else:
        argv += ["-b", str(spec.key_size)]
    argv += ["-k", str(artifacts.private_key_path)]
    return argv


class KeyGenerator:
    """Runs the key generator as the service identity."""

    def __init__(self, settings: Settings, runner: CommandRunner):
        self._settings = settings
        self._runner = runner

    def generate(self, spec: KeySpec, artifacts: KeyArtifactSet) -> GenerationOutcome:
        """
        Create the public and private key files.

        The generator's standard output becomes the public key file; its
        diagnostic output is kept for inspection.

        Raises:
            KeyGenerationError: If the generator fails or reports a permission problem
        """
        argv = build_keygen_command(self._settings.keygen_command, spec, artifacts)
        logger.info(
            "Generating DKIM key",
            key_type=spec.key_type.value,
            key_size=spec.key_size if spec.key_type is KeyType.RSA else None,
            selector=spec.selector,
            domain=spec.domain,
        )

        try:
            with open(artifacts.public_key_path, "w", encoding="utf-8") as public_key:
                result = self._runner.run(
                    argv,
                    user=self._settings.effective_user,
                    stdout=public_key,
                )
        except OSError as e:
            raise KeyGenerationError(f"Could not run key generator: {e}") from e

        outcome = GenerationOutcome.from_result(result, self._settings.permission_denied_marker)
        if not outcome.succeeded:
            logger.error(
                "Key generation failed",
                returncode=outcome.returncode,
                permission_denied=outcome.permission_denied,
                log=outcome.log,
            )
            raise KeyGenerationError(
                f"Key generation for {spec.record_name} failed; see the generator log",
                log=outcome.log,
            )

        hand_over(artifacts.public_key_path, self._settings)
        logger.debug("Key generator log", log=outcome.log)
        return outcome

"""On-disk key artifacts: existence checks and forced replacement."""

from mailkeys.common.errors import ArtifactExistsError
from mailkeys.common.logging import get_logger
from mailkeys.common.ownership import hand_over
from mailkeys.common.settings import Settings
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec

logger = get_logger(__name__)


class KeyMaterialStore:
    """Manages the artifact files of DKIM keys inside the key directory."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def artifacts_for(self, spec: KeySpec) -> KeyArtifactSet:
        """Paths of the artifacts for ``spec``; nothing is checked on disk."""
        return KeyArtifactSet.for_spec(spec, self._settings.key_dir)

    def check_and_prepare(self, spec: KeySpec) -> KeyArtifactSet:
        """
        Make room for a new key.

        Existing artifact files abort the run unless ``spec.force_overwrite``
        is set, in which case exactly those files are removed. Afterwards the
        key and override directories exist and the key directory belongs to
        the service identity.

        Raises:
            ArtifactExistsError: If artifacts exist and overwriting was not requested
        """
        artifacts = self.artifacts_for(spec)
        existing = artifacts.existing()

        if existing:
            if not spec.force_overwrite:
                names = ", ".join(path.name for path in existing)
                raise ArtifactExistsError(
                    f"Key files already exist ({names}); use --force to overwrite them",
                    existing=[str(path) for path in existing],
                )
            for path in existing:
                path.unlink()
                logger.info("Removed existing key file", path=str(path))

        self._settings.key_dir.mkdir(parents=True, exist_ok=True)
        self._settings.override_dir.mkdir(parents=True, exist_ok=True)
        hand_over(self._settings.key_dir, self._settings, recursive=True)
        return artifacts

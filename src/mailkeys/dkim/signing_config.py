"""rspamd dkim_signing.conf: written once, then left to the administrator."""

import shutil
from dataclasses import dataclass
from enum import Enum

from mailkeys.common.logging import get_logger
from mailkeys.common.ownership import hand_over
from mailkeys.common.settings import Settings
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec

logger = get_logger(__name__)

SIGNING_CONFIG_TEMPLATE = """\
# documentation: https://rspamd.com/doc/modules/dkim_signing.html

enabled = true;

sign_authenticated = true;
sign_local = true;
try_fallback = false;

use_domain = "header";
use_redis = false; # don't change unless Redis also provides the DKIM keys
use_esld = true;

check_pubkey = true; # you want to use this in the beginning

domain {{
    {domain} {{
        path = "{key_path}";
        selector = "{selector}";
    }}
}}
"""


class ConfigAction(str, Enum):
    CREATE = "create"
    KEEP = "keep"


@dataclass(frozen=True)
class ConfigPlan:
    """What to do with the signing config; ``content`` is set for CREATE only."""

    action: ConfigAction
    content: bytes | None = None


def render_signing_config(spec: KeySpec, artifacts: KeyArtifactSet) -> str:
    return SIGNING_CONFIG_TEMPLATE.format(
        domain=spec.domain,
        key_path=artifacts.private_key_path,
        selector=spec.selector,
    )


def plan_signing_config(
    spec: KeySpec,
    artifacts: KeyArtifactSet,
    existing: bytes | None,
) -> ConfigPlan:
    """Decide between creating the config and keeping an existing one."""
    if existing is not None:
        return ConfigPlan(ConfigAction.KEEP)
    return ConfigPlan(ConfigAction.CREATE, render_signing_config(spec, artifacts).encode("utf-8"))


class ConfigReconciler:
    """Creates dkim_signing.conf in the override and live directories."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def reconcile(self, spec: KeySpec, artifacts: KeyArtifactSet) -> bool:
        """
        Write the signing config unless one already exists.

        Returns:
            True if a new config was written
        """
        override_path = self._settings.override_config_path
        existing = override_path.read_bytes() if override_path.exists() else None
        plan = plan_signing_config(spec, artifacts, existing)

        if plan.action is ConfigAction.KEEP:
            logger.info(
                "Signing config already exists; adjust it manually to use the new key",
                path=str(override_path),
                key_path=str(artifacts.private_key_path),
                selector=spec.selector,
            )
            return False

        assert plan.content is not None
        live_path = self._settings.live_config_path
        live_path.parent.mkdir(parents=True, exist_ok=True)
        override_path.parent.mkdir(parents=True, exist_ok=True)
        override_path.write_bytes(plan.content)

        # rspamd only picks up override changes through a watcher that cannot
        # know about this file yet. The override file stays only once the live
        # copy is in place.
        try:
            shutil.copyfile(override_path, live_path)
            hand_over(override_path, self._settings)
            hand_over(live_path, self._settings)
        except (OSError, LookupError):
            override_path.unlink(missing_ok=True)
            raise

        logger.info("Wrote signing config", path=str(override_path), live_path=str(live_path))
        return True

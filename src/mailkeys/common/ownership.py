"""Hand files over to the mail filter's runtime identity."""

import os
import shutil
from pathlib import Path

from mailkeys.common.logging import get_logger
from mailkeys.common.settings import Settings

logger = get_logger(__name__)


def hand_over(path: Path, settings: Settings, recursive: bool = False) -> None:
    """
    Change owner of ``path`` to the configured service user and group.

    Does nothing when ownership management is disabled.
    """
    if not settings.manage_ownership:
        return

    targets = [path]
    if recursive and path.is_dir():
        for root, dirs, files in os.walk(path):
            targets.extend(Path(root) / name for name in dirs + files)

    for target in targets:
        shutil.chown(target, user=settings.service_user, group=settings.service_group)
    logger.debug(
        "Changed ownership",
        path=str(path),
        user=settings.service_user,
        group=settings.service_group,
        count=len(targets),
    )

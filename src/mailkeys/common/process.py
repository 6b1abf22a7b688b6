"""Synchronous execution of external commands."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import IO

from mailkeys.common.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Run external commands to completion.

    No timeout is applied: a hanging command blocks the caller.
    """

    def run(
        self,
        argv: list[str],
        *,
        user: str | None = None,
        stdout: IO[str] | None = None,
    ) -> CommandResult:
        """
        Run ``argv`` and capture its output.

        Args:
            argv: Program and arguments
            user: Run as this user instead of the current one (requires root)
            stdout: Stream receiving standard output instead of capturing it

        Returns:
            CommandResult with exit status and captured text

        Raises:
            OSError: If the program cannot be started
        """
        logger.debug("Running command", argv=argv, user=user)
        kwargs = {}
        if user is not None:
            kwargs["user"] = user
        proc = subprocess.run(
            argv,
            stdout=stdout if stdout is not None else subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
            **kwargs,
        )
        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

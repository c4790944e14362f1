"""Version sources for the runtime and package managers."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from constants import ToolSpec
from errors import ToolInvocationError

logger = logging.getLogger(__name__)


class VersionSource:
    """Reports the installed version of one tool.

    Subclasses implement :meth:`report_version` and raise
    :class:`ToolInvocationError` when the tool cannot be queried.
    """

    def report_version(self) -> str:
        raise NotImplementedError


class CommandSource(VersionSource):
    """Run ``command`` and return its trimmed standard output."""

    def __init__(self, command: Sequence[str]):
        self.command = list(command)

    def report_version(self) -> str:
        logger.debug("Running %s", " ".join(self.command))
        try:
            out = subprocess.check_output(
                self.command,
                encoding="utf-8",
                errors="replace",
                stderr=subprocess.PIPE,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ToolInvocationError(
                f"Failed to run '{' '.join(self.command)}': {exc}"
            ) from exc
        return out.strip()


def sources_for(tools: dict[str, ToolSpec]) -> dict[str, VersionSource]:
    """Return a :class:`CommandSource` for every tool spec, keyed by engine."""
    return {name: CommandSource(spec.command) for name, spec in tools.items()}

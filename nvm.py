"""Switch the active Node runtime through nvm before the version checks.

nvm is a shell function, so every call sources ``$NVM_DIR/nvm.sh`` in a
``bash`` subprocess first.  A missing or failing nvm is never fatal: the
adapter reports it and the caller falls back to checking the global
runtime directly.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Mapping

from constants import DEFAULT_MANIFEST, DEFAULT_PIN_FILE, NVM_DIR_ENV, NVM_SCRIPT
from errors import ToolInvocationError
from io_utils import read_pin_file
from reporting import Reporter
from version_check import is_compound_range, sanitize_version

logger = logging.getLogger(__name__)


class NvmAdapter:
    """Check for nvm, pick the wanted Node version and run ``nvm use``.

    Parameters
    ----------
    nvm_dir : str or Path or None
        nvm installation directory (normally ``$NVM_DIR``).
    pin_file : str or Path
        Version-pin file consulted before the manifest.
    reporter : Reporter
        Destination for progress lines.
    manifest_name : str
        Manifest file name used in progress lines.
    run : callable
        ``subprocess.run`` compatible callable; replaced in tests.
    """

    def __init__(
        self,
        nvm_dir,
        pin_file=DEFAULT_PIN_FILE,
        reporter: Reporter | None = None,
        manifest_name: str = DEFAULT_MANIFEST,
        run=None,
    ):
        self.nvm_dir = Path(nvm_dir) if nvm_dir else None
        self.pin_file = Path(pin_file)
        self.reporter = reporter or Reporter()
        self.manifest_name = manifest_name
        self.run = run or subprocess.run

    def _invoke(self, args: list[str], *, quiet: bool) -> None:
        if self.nvm_dir is None:
            raise ToolInvocationError(f"{NVM_DIR_ENV} is not set")
        script = self.nvm_dir / NVM_SCRIPT
        if not script.is_file():
            raise ToolInvocationError(f"{script} not found")

        cmd = f". {shlex.quote(str(script))} && nvm " + " ".join(
            shlex.quote(a) for a in args
        )
        kwargs = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL} if quiet else {}
        logger.debug("Running nvm %s", " ".join(args))
        try:
            self.run(["bash", "-c", cmd], check=True, **kwargs)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ToolInvocationError(f"nvm {' '.join(args)} failed: {exc}") from exc

    def self_check(self) -> None:
        """Raise :class:`ToolInvocationError` unless ``nvm --version`` succeeds."""
        self._invoke(["--version"], quiet=True)

    def use(self, version: str) -> None:
        """Run ``nvm use`` with output passed straight to the terminal."""
        self._invoke(["use", version], quiet=False)

    def resolve_version(self, engines: Mapping[str, str]) -> str | None:
        """Return the wanted Node version from the pin file or ``engines.node``."""

        pinned = read_pin_file(self.pin_file)
        if pinned:
            self.reporter.info(f"Using Node version from {self.pin_file.name}: {pinned}")
            return pinned

        required = engines.get("node")
        if required:
            self.reporter.info(
                f"Using Node version from {self.manifest_name}: {required}"
            )
            return required

        self.reporter.info(
            f"{self.pin_file.name} not found and {self.manifest_name} doesn't "
            "specify a Node version. Global version will be used."
        )
        return None

    def try_use(self, engines: Mapping[str, str]) -> bool:
        """Switch Node through nvm; return ``True`` only if the switch ran."""

        try:
            self.self_check()
            version = self.resolve_version(engines)
            if version is None:
                return False

            sanitized = sanitize_version(version)
            if is_compound_range(sanitized):
                logger.warning(
                    "Node version '%s' is a compound range; passing '%s' to nvm unchanged",
                    version,
                    sanitized,
                )
            logger.debug("Sanitized Node version to use: %s", sanitized)
            self.use(sanitized)
            return True
        except ToolInvocationError as exc:
            self.reporter.detail(f"NVM not found or error using NVM: {exc.reason}")
            self.reporter.info("NVM not found. Using global Node version.")
            return False

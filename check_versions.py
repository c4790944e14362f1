#!/usr/bin/env python3
"""
check_versions.py

Toolchain Preflight Check
=========================

Usage:
    python check_versions.py [verbose] \
        [--config   preflight.yaml] \
        [--manifest package.json] \
        [--pin-file .nvmrc] \
        [--nvm-dir  ~/.nvm]

Run before build or install steps.  The check performs the following:

  1. Load settings (optional YAML) and the project manifest (JSON).
     -> A manifest without an ``engines`` section aborts the run.
  2. If nvm is available, switch Node to the version named in ``.nvmrc``
     (or ``engines.node``) and trust nvm for node and npm.
  3. Otherwise compare ``node -v`` and ``npm -v`` with ``engines.node`` and
     ``engines.npm``.
  4. Compare ``yarn -v`` with ``engines.yarn`` when it is declared.

Any failure prints ``Error: <reason>`` and ``Aborting`` to stderr and exits
with status 1.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Mapping

from cli_parser import parse_args
from config.validation import validate_engines
from constants import (
    ALTERNATE_MANAGER,
    DEFAULT_MANIFEST,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_TOOLS,
    EXIT_FAILURE,
    EXIT_OK,
    NVM_DIR_ENV,
    PRIMARY_MANAGER,
    RUNTIME,
    ToolSpec,
    tools_from_config,
)
from errors import CheckError, ConstraintMismatch, ToolInvocationError
from io_utils import load_config, load_manifest
from nvm import NvmAdapter
from version_sources import VersionSource, sources_for
from reporting import Reporter
from version_check import satisfies

logger = logging.getLogger(__name__)


def check_tool(
    spec: ToolSpec,
    required: str | None,
    source: VersionSource,
    reporter: Reporter,
) -> None:
    """Compare the version reported by ``source`` with ``required``.

    An undeclared constraint is reported and skipped without querying the
    tool.

    Raises
    ------
    ToolInvocationError
        If the tool cannot be queried.
    ConstraintMismatch
        If the reported version does not satisfy ``required``.
    """
    if not required:
        reporter.info(f"No required {spec.label} version specified")
        return

    try:
        current = source.report_version()
    except ToolInvocationError as exc:
        logger.debug(exc.reason)
        raise ToolInvocationError(f"Failed to check {spec.label} version") from exc

    reporter.detail(f"{spec.label} required: '{required}' - current: '{current}'")
    if not satisfies(current, required):
        raise ConstraintMismatch(spec.label, required, current)


def run_checks(
    manifest: Mapping,
    sources: Mapping[str, VersionSource],
    reporter: Reporter,
    nvm: NvmAdapter | None = None,
    tools: Mapping[str, ToolSpec] | None = None,
    manifest_name: str = DEFAULT_MANIFEST,
) -> bool:
    """Run every check against ``manifest``; return whether nvm switched Node.

    Raises :class:`CheckError` subclasses on the first failure.
    """
    tools = tools or DEFAULT_TOOLS
    engines = validate_engines(manifest, manifest_name)

    used_nvm = nvm.try_use(engines) if nvm is not None else False
    if not used_nvm:
        for name in (RUNTIME.engine, PRIMARY_MANAGER.engine):
            check_tool(tools[name], engines.get(name), sources[name], reporter)
    else:
        reporter.info("Verified versions (through NVM).")

    alternate = tools[ALTERNATE_MANAGER.engine]
    check_tool(alternate, engines.get(alternate.engine), sources[alternate.engine], reporter)
    return used_nvm


def main(argv=None) -> int:
    args = parse_args(argv)
    reporter = Reporter(verbose=args.verbose)

    try:
        config_path = args.config
        if config_path is None and Path(DEFAULT_SETTINGS_FILE).is_file():
            config_path = DEFAULT_SETTINGS_FILE
        cfg = load_config(config_path)

        if args.manifest:
            cfg["manifest"] = args.manifest
        if args.pin_file:
            cfg["pin_file"] = args.pin_file
        if args.nvm_dir:
            cfg["nvm_dir"] = args.nvm_dir
        if args.debug:
            cfg["log_level"] = "DEBUG"

        # Configure logging as early as possible
        numeric_level = getattr(logging, cfg["log_level"].upper(), logging.INFO)
        logging.basicConfig(
            level=numeric_level,
            format="%(levelname)s:%(name)s:%(message)s",
        )
        reporter.verbose = reporter.verbose or cfg["verbose"]

        manifest_path = Path(cfg["manifest"])
        manifest = load_manifest(manifest_path)

        tools = tools_from_config(cfg)
        nvm = NvmAdapter(
            cfg["nvm_dir"] or os.environ.get(NVM_DIR_ENV),
            pin_file=cfg["pin_file"],
            reporter=reporter,
            manifest_name=manifest_path.name,
        )
        run_checks(
            manifest,
            sources_for(tools),
            reporter,
            nvm=nvm,
            tools=tools,
            manifest_name=manifest_path.name,
        )
    except CheckError as exc:
        reporter.fail(exc.reason)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

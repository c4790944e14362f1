"""Command-line argument parser for the toolchain preflight check."""

import argparse

from constants import DEFAULT_SETTINGS_FILE, VERBOSE_ARG


def parse_args(argv=None):
    """Parse command line arguments."""
    p = argparse.ArgumentParser(
        description=(
            "Check that the installed node, npm and Yarn versions satisfy the "
            "engines declared in package.json"
        ),
        epilog=(
            "When nvm is installed the Node version from .nvmrc (or "
            "engines.node) is activated instead of checking node and npm."
        ),
    )
    p.add_argument(
        "mode",
        nargs="?",
        default=None,
        help=f"Pass '{VERBOSE_ARG}' to print required and current versions",
    )
    p.add_argument(
        "--config",
        "-c",
        default=None,
        help=(
            "Path to a YAML settings file "
            f"(default: {DEFAULT_SETTINGS_FILE} when present)"
        ),
    )
    p.add_argument(
        "--manifest",
        help="Manifest to read. Providing this option overrides `manifest` in the settings file",
    )
    p.add_argument(
        "--pin-file",
        help="Node version-pin file. Providing this option overrides `pin_file` in the settings file",
    )
    p.add_argument(
        "--nvm-dir",
        help=(
            "nvm installation directory. Providing this option overrides "
            "`nvm_dir` in the settings file and $NVM_DIR"
        ),
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging. Providing this option overrides `log_level` in the settings file",
    )

    args = p.parse_args(argv)
    args.verbose = args.mode == VERBOSE_ARG
    return args

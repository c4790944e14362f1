# constants.py
"""Shared constants for the toolchain checks."""

from dataclasses import dataclass

# Files consulted relative to the working directory
DEFAULT_MANIFEST = "package.json"
DEFAULT_PIN_FILE = ".nvmrc"
DEFAULT_SETTINGS_FILE = "preflight.yaml"

# Environment variable naming the nvm installation directory
NVM_DIR_ENV = "NVM_DIR"
NVM_SCRIPT = "nvm.sh"

# Set to ``True`` to always print the detailed comparison lines.
VERBOSE_FORCED = False

# Positional CLI value that enables verbose output
VERBOSE_ARG = "verbose"

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass(frozen=True)
class ToolSpec:
    """A checked tool: its ``engines`` key, display label and version command."""

    engine: str
    label: str
    command: tuple[str, ...]


RUNTIME = ToolSpec(engine="node", label="node", command=("node", "-v"))
PRIMARY_MANAGER = ToolSpec(engine="npm", label="npm", command=("npm", "-v"))
ALTERNATE_MANAGER = ToolSpec(engine="yarn", label="Yarn", command=("yarn", "-v"))

DEFAULT_TOOLS = {
    spec.engine: spec for spec in (RUNTIME, PRIMARY_MANAGER, ALTERNATE_MANAGER)
}


def tools_from_config(cfg: dict | None) -> dict[str, ToolSpec]:
    """Return tool specs with optional command overrides from ``cfg``.

    The settings may define a ``"tools"`` section mapping engine names to
    ``{"command": [...]}`` dictionaries. Missing entries fall back to
    :data:`DEFAULT_TOOLS`.
    """

    if cfg is None:
        return DEFAULT_TOOLS.copy()

    section = cfg.get("tools", {}) if isinstance(cfg, dict) else {}

    result: dict[str, ToolSpec] = {}
    for name, spec in DEFAULT_TOOLS.items():
        override = section.get(name, {}) if isinstance(section, dict) else {}
        command = override.get("command")
        if command:
            spec = ToolSpec(engine=spec.engine, label=spec.label, command=tuple(command))
        result[name] = spec

    return result

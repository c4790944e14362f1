# io_utils.py
from pathlib import Path
import json
import logging
from copy import deepcopy
from collections.abc import Mapping
from typing import Any

import jsonschema
import yaml

from constants import DEFAULT_MANIFEST, DEFAULT_PIN_FILE, VERBOSE_FORCED
from errors import ConfigError


logger = logging.getLogger(__name__)


_TOOL_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "command": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
        },
    },
}

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "manifest": {"type": "string"},
        "pin_file": {"type": "string"},
        "nvm_dir": {"type": ["string", "null"]},
        "verbose": {"type": "boolean"},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
        "tools": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "node": _TOOL_SCHEMA,
                "npm": _TOOL_SCHEMA,
                "yarn": _TOOL_SCHEMA,
            },
        },
    },
}

CONFIG_DEFAULTS: dict[str, Any] = {
    "manifest": DEFAULT_MANIFEST,
    "pin_file": DEFAULT_PIN_FILE,
    "nvm_dir": None,
    "verbose": VERBOSE_FORCED,
    "log_level": "INFO",
    "tools": {},
}


class _UniqueKeyLoader(yaml.SafeLoader):
    pass


def _construct_mapping(loader, node, deep=False):
    mapping = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ValueError(f"Duplicate key '{key}' in configuration")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


_UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping
)


def load_config(config_path=None):
    """Load preflight settings from a mapping or YAML file and validate them.

    ``None`` yields the defaults.  Keys missing from the file are filled in
    from :data:`CONFIG_DEFAULTS`.

    Raises
    ------
    ConfigError
        If the file is missing, is not YAML, contains duplicate keys or does
        not match :data:`CONFIG_SCHEMA`.
    """

    if config_path is None:
        cfg = {}
    elif isinstance(config_path, Mapping):
        cfg = dict(config_path)
    else:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        if path.suffix not in {".yaml", ".yml"}:
            raise ConfigError("Config file must be YAML")
        try:
            with open(path, "r", encoding="utf-8") as f:
                cfg = yaml.load(f, Loader=_UniqueKeyLoader) or {}
        except (ValueError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc

    try:
        jsonschema.validate(cfg, CONFIG_SCHEMA)
    except jsonschema.exceptions.ValidationError as e:
        where = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Invalid settings at {where}: {e.message}") from e

    merged = deepcopy(CONFIG_DEFAULTS)
    merged.update(cfg)
    return merged


def load_manifest(manifest_path=DEFAULT_MANIFEST) -> dict:
    """Return the parsed JSON manifest at ``manifest_path``.

    Any read or parse problem, or a top level that is not a JSON object, is
    reported as a single :class:`ConfigError` naming the file.
    """

    path = Path(manifest_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            manifest = json.load(f)
    except (OSError, ValueError) as exc:
        logger.debug("Could not load %s -> %s", path, exc)
        raise ConfigError(f"Failed to read or parse {path.name}") from exc
    if not isinstance(manifest, dict):
        raise ConfigError(f"Failed to read or parse {path.name}")
    return manifest


def read_pin_file(pin_path=DEFAULT_PIN_FILE) -> str | None:
    """Return the trimmed version in ``pin_path`` or ``None`` if absent or blank.

    Undecodable bytes are replaced rather than raised.
    """

    path = Path(pin_path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return None
    return text or None

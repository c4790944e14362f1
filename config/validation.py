from collections.abc import Mapping

from errors import ConfigError


def validate_engines(manifest: Mapping, manifest_name: str = "package.json") -> dict:
    """Return the ``engines`` section of a manifest.

    Parameters
    ----------
    manifest : Mapping
        Parsed manifest.  Only ``engines`` is inspected; it must map tool
        names to version-range strings.
    manifest_name : str
        File name used in error messages.

    Raises
    ------
    ConfigError
        If ``engines`` is missing or null, is not a mapping, or declares a
        constraint that is not a string.  An empty mapping declares nothing
        and is returned as is.
    """
    engines = manifest.get("engines")
    if engines is None or (not isinstance(engines, Mapping) and not engines):
        raise ConfigError(f"No engines entry in {manifest_name}")
    if not isinstance(engines, Mapping):
        raise ConfigError(f"engines entry in {manifest_name} must be an object")

    bad = sorted(
        name
        for name, value in engines.items()
        if value is not None and not isinstance(value, str)
    )
    if bad:
        raise ConfigError(
            f"engines entries in {manifest_name} must be version strings: "
            + ", ".join(bad)
        )
    return dict(engines)

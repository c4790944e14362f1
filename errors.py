"""Exceptions raised by the toolchain checks.

Every fatal condition derives from :class:`CheckError`; the entry point in
:mod:`check_versions` is the only place that turns one into an exit code.
"""


class CheckError(Exception):
    """Base class for all fatal preflight failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConfigError(CheckError):
    """Manifest or settings file missing, unreadable or malformed."""


class ToolInvocationError(CheckError):
    """An external tool could not be started or exited with an error."""


class ConstraintMismatch(CheckError):
    """A reported tool version does not satisfy its declared range."""

    def __init__(self, label: str, required: str, current: str):
        super().__init__(
            f"Required {label} version '{required}' not satisfied. "
            f"Current: '{current}'."
        )
        self.label = label
        self.required = required
        self.current = current

"""Test doubles for version sources."""

from errors import ToolInvocationError
from version_sources import VersionSource


class FakeSource(VersionSource):
    """Source returning a fixed version, or failing when ``version`` is None."""

    def __init__(self, version=None):
        self.version = version
        self.calls = 0

    def report_version(self):
        self.calls += 1
        if self.version is None:
            raise ToolInvocationError("tool not found")
        return self.version

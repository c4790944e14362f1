import pytest
import sys
from pathlib import Path

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Skip all tests when required dependencies are missing
_required = ["packaging", "yaml", "jsonschema"]
for pkg in _required:
    pytest.importorskip(pkg, reason=f"Package '{pkg}' is required for tests")

from reporting import Reporter
from tests.fakes import FakeSource


@pytest.fixture
def make_sources():
    def _make(node=None, npm=None, yarn=None):
        return {"node": FakeSource(node), "npm": FakeSource(npm), "yarn": FakeSource(yarn)}

    return _make


@pytest.fixture
def reporter():
    return Reporter()


@pytest.fixture
def verbose_reporter():
    return Reporter(verbose=True)

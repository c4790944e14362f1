import sys
from pathlib import Path
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from constants import DEFAULT_TOOLS, tools_from_config
from errors import ToolInvocationError
from version_sources import CommandSource, sources_for


def test_command_source_trims_output():
    source = CommandSource([sys.executable, "-c", "print('  1.22.19  ')"])
    assert source.report_version() == "1.22.19"


def test_command_source_missing_tool():
    source = CommandSource(["definitely-not-a-real-tool-xyz", "-v"])
    with pytest.raises(ToolInvocationError):
        source.report_version()


def test_command_source_nonzero_exit():
    source = CommandSource([sys.executable, "-c", "import sys; sys.exit(3)"])
    with pytest.raises(ToolInvocationError, match="Failed to run"):
        source.report_version()


def test_sources_for_default_tools():
    sources = sources_for(DEFAULT_TOOLS)
    assert set(sources) == {"node", "npm", "yarn"}
    assert sources["npm"].command == ["npm", "-v"]
    assert sources["node"].command == ["node", "-v"]


def test_tool_command_override():
    tools = tools_from_config({"tools": {"yarn": {"command": ["corepack", "yarn", "-v"]}}})
    assert tools["yarn"].command == ("corepack", "yarn", "-v")
    assert tools["yarn"].label == "Yarn"
    assert tools["npm"] == DEFAULT_TOOLS["npm"]


def test_command_source_undecodable_output():
    source = CommandSource(
        [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff1.22.19\\n')"]
    )
    version = source.report_version()
    assert version.endswith("1.22.19")
    assert version.startswith("\ufffd")

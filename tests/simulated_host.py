"""
Scripted host responses shared by the test suite.

A "healthy" host has Python 3.11 with pip, no fetchlog account until
the first ``useradd``, and a unit that reports running once started.
"""

import textwrap

from fetchlog_deploy.adapters.mock import MockRunner
from fetchlog_deploy.core.models.command import CommandResult
from fetchlog_deploy.core.services.probe import VERSION_SNIPPET

PYTHON_BIN = "/usr/bin/python3"

VERSION_QUERY = [PYTHON_BIN, "-c", VERSION_SNIPPET]
PIP_INSTALL = [PYTHON_BIN, "-m", "pip", "install"]
IMPORT_CHECK = [
    PYTHON_BIN,
    "-c",
    "import fastapi, uvicorn, websockets, jinja2, aiofiles, dateutil",
]

SHOW_RUNNING = textwrap.dedent("""\
    LoadState=loaded
    ActiveState=active
    SubState=running
    UnitFileState=enabled
    MainPID=4242
""")

SHOW_NOT_FOUND = textwrap.dedent("""\
    LoadState=not-found
    ActiveState=inactive
    SubState=dead
    UnitFileState=
    MainPID=0
""")

STATUS_TEXT = (
    "● fetchlog.service - FetchLog Universal Syslog Server & Log Viewer\n"
    "     Loaded: loaded (/etc/systemd/system/fetchlog.service; enabled)\n"
    "     Active: active (running)\n"
)


def healthy_host() -> MockRunner:
    mock = MockRunner()
    mock.set_output(VERSION_QUERY, "3.11\n")
    mock.set_output(
        [PYTHON_BIN, "-m", "pip", "--version"],
        "pip 24.0 from /usr/lib/python3/dist-packages/pip (python 3.11)\n",
    )
    mock.set_response(
        ["id", "-u", "fetchlog"],
        CommandResult.failure(stderr="id: 'fetchlog': no such user"),
        CommandResult.success(stdout="998\n"),
    )
    mock.set_output(["systemctl", "show", "fetchlog"], SHOW_RUNNING)
    mock.set_output(["systemctl", "status", "fetchlog"], STATUS_TEXT)
    return mock

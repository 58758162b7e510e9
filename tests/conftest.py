import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from launchctlutil.launchctl import LaunchctlClient

MAX_OUTPUT_LINES = 32
FAKE_LAUNCHCTL = Path("/bin/launchctl")

Response = tuple[int, str] | Callable[[list[str]], tuple[int, str]]


class FakeRunner:
    """Stands in for ``subprocess.run``; answers per launchctl argument tuple."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.kwargs: list[dict] = []
        self.responses: dict[tuple[str, ...], Response] = {}

    def respond(self, *args: str, returncode: int = 0, output: str = "") -> None:
        self.responses[args] = (returncode, output)

    def __call__(self, cmd, **kwargs) -> subprocess.CompletedProcess:
        args = tuple(cmd[1:])
        self.calls.append(args)
        self.kwargs.append(kwargs)
        response = self.responses.get(args, (0, ""))
        if callable(response):
            response = response(list(args))
        returncode, output = response
        return subprocess.CompletedProcess(cmd, returncode, stdout=output)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def launchctl(runner: FakeRunner) -> LaunchctlClient:
    return LaunchctlClient(FAKE_LAUNCHCTL, runner=runner)


@pytest.fixture
def home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def as_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("launchctlutil.launchctl.os.geteuid", lambda: 0)


@pytest.fixture
def as_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("launchctlutil.launchctl.os.geteuid", lambda: 501)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_logreport(report: pytest.TestReport) -> None:
    """Limit captured output per failing test."""
    if report.when == "call" and report.failed:
        new_sections: list[tuple[str, str]] = []
        for title, content in report.sections:
            if title.startswith(("Captured stdout", "Captured stderr")):
                lines = content.splitlines()
                if len(lines) > MAX_OUTPUT_LINES:
                    truncated = "\n".join([*lines[:MAX_OUTPUT_LINES], "... [output truncated]"])
                    new_sections.append((title, truncated))
                else:
                    new_sections.append((title, content))
            else:
                new_sections.append((title, content))
        report.sections = new_sections

import stat
from pathlib import Path

import pytest

from launchctlutil.builder import ConfigurationBuilder
from launchctlutil.errors import (
    InstallVerificationError,
    LaunchctlCommandError,
    RootRequiredError,
)
from launchctlutil.kind import Kind
from launchctlutil.service import (
    LaunchdService,
    current_status,
    install,
    is_installed,
    remove,
    start,
    stop,
)
from launchctlutil.status import Status

LABEL = "com.example.installer"


def make_config(kind: Kind = Kind.USER_AGENT):
    return (
        ConfigurationBuilder()
        .set_label(LABEL)
        .set_kind(kind)
        .set_command("echo")
        .add_argument("foo")
        .set_run_at_load(True)
        .build()
    )


def listed(*_args) -> tuple[int, str]:
    return 0, f"-\t0\t{LABEL}\n"


def test_install_writes_loads_and_verifies(home, runner, launchctl):
    config = make_config()
    runner.responses[("list",)] = listed
    install(config, launchctl)

    path = config.file_path()
    assert path.read_text(encoding="utf-8") == config.contents
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert runner.calls == [("unload", str(path)), ("load", str(path)), ("list",)]


def test_install_replaces_existing_file(home, runner, launchctl):
    config = make_config()
    runner.responses[("list",)] = listed
    path = config.file_path()
    path.parent.mkdir(parents=True)
    path.write_text("stale", encoding="utf-8")

    install(config, launchctl)
    assert path.read_text(encoding="utf-8") == config.contents


def test_install_ignores_failed_preinstall_unload(home, runner, launchctl):
    config = make_config()
    path = config.file_path()
    runner.respond("unload", str(path), returncode=1, output="Could not find specified service\n")
    runner.responses[("list",)] = listed

    install(config, launchctl)
    assert path.exists()


def test_install_verification_failure_removes_file(home, runner, launchctl):
    config = make_config()
    runner.respond("list", output="-\t0\tcom.example.other\n")

    with pytest.raises(InstallVerificationError, match=LABEL):
        install(config, launchctl)
    assert not config.file_path().exists()


def test_install_load_failure_propagates(home, runner, launchctl):
    config = make_config()
    path = config.file_path()
    runner.respond("load", str(path), output=f"{path}: Invalid property list\n")

    with pytest.raises(LaunchctlCommandError, match="Invalid property list"):
        install(config, launchctl)


def test_install_daemon_requires_root(as_user, runner, launchctl):
    with pytest.raises(RootRequiredError):
        install(make_config(Kind.DAEMON), launchctl)
    assert runner.calls == []


def test_install_daemon_as_root(fs, as_root, runner, launchctl):
    config = make_config(Kind.DAEMON)
    runner.responses[("list",)] = listed
    install(config, launchctl)
    assert Path("/Library/LaunchDaemons/com.example.installer.plist").read_text(encoding="utf-8") == config.contents


def test_remove_unloads_and_deletes(tmp_path, runner, launchctl):
    path = tmp_path / "job.plist"
    path.write_text("x", encoding="utf-8")
    remove(path, Kind.USER_AGENT, launchctl)
    assert not path.exists()
    assert runner.calls == [("unload", str(path))]


def test_remove_missing_file_raises(tmp_path, runner, launchctl):
    with pytest.raises(FileNotFoundError):
        remove(tmp_path / "missing.plist", Kind.USER_AGENT, launchctl)


def test_remove_unload_failure_keeps_file(tmp_path, runner, launchctl):
    path = tmp_path / "job.plist"
    path.write_text("x", encoding="utf-8")
    runner.respond("unload", str(path), returncode=5, output="boom\n")
    with pytest.raises(LaunchctlCommandError):
        remove(path, Kind.USER_AGENT, launchctl)
    assert path.exists()


def test_remove_daemon_requires_root(as_user, tmp_path, launchctl):
    with pytest.raises(RootRequiredError):
        remove(tmp_path / "job.plist", Kind.DAEMON, launchctl)


def test_start_and_stop(runner, launchctl):
    start(LABEL, Kind.USER_AGENT, launchctl)
    stop(LABEL, Kind.USER_AGENT, launchctl)
    assert runner.calls == [("start", LABEL), ("stop", LABEL)]


@pytest.mark.parametrize("operation", [start, stop])
def test_start_stop_daemon_requires_root(as_user, runner, launchctl, operation):
    with pytest.raises(RootRequiredError):
        operation(LABEL, Kind.DAEMON, launchctl)
    assert runner.calls == []


def test_current_status_running(runner, launchctl):
    runner.respond("list", LABEL, output='{\n\t"LastExitStatus" = 0;\n\t"PID" = 42;\n};\n')
    details = current_status(LABEL, launchctl)
    assert details.status is Status.RUNNING
    assert details.pid == 42


def test_current_status_not_installed(runner, launchctl):
    runner.respond(
        "list",
        "com.apple.nevergoingtoexisttrash",
        returncode=113,
        output='Could not find service "com.apple.nevergoingtoexisttrash" in domain for port\n',
    )
    details = current_status("com.apple.nevergoingtoexisttrash", launchctl)
    assert details.status is Status.NOT_INSTALLED


def test_current_status_other_failure_propagates(runner, launchctl):
    runner.respond("list", LABEL, returncode=1, output="Operation not permitted\n")
    with pytest.raises(LaunchctlCommandError):
        current_status(LABEL, launchctl)


def test_is_installed_delegates(home, runner, launchctl):
    assert is_installed(make_config(), launchctl) is False


def test_launchd_service_wrapper(home, runner, launchctl):
    svc = LaunchdService(make_config(), launchctl=launchctl)
    runner.responses[("list",)] = listed
    runner.respond("list", LABEL, output='\t"PID" = 7;\n')

    assert svc.plist_path.name == f"{LABEL}.plist"
    svc.install()
    assert svc.is_installed()
    svc.start()
    assert svc.status().pid == 7
    svc.stop()
    svc.uninstall()
    assert not svc.plist_path.exists()
    assert runner.calls[-4:] == [("start", LABEL), ("list", LABEL), ("stop", LABEL), ("unload", str(svc.plist_path))]


def test_install_restricts_mode_before_writing(home, runner, launchctl, monkeypatch):
    config = make_config()
    runner.responses[("list",)] = listed
    modes = []
    write_bytes = Path.write_bytes

    def spy(self, data):
        modes.append(stat.S_IMODE(self.stat().st_mode))
        return write_bytes(self, data)

    monkeypatch.setattr(Path, "write_bytes", spy)
    install(config, launchctl)
    assert modes == [0o600]


def test_install_narrows_mode_of_leftover_file(home, runner, launchctl):
    config = make_config()
    path = config.file_path()
    path.parent.mkdir(parents=True)
    path.write_text("stale", encoding="utf-8")
    path.chmod(0o644)
    # unload of the old install fails, so the stale file is left in place
    runner.respond("unload", str(path), returncode=1, output="boom\n")
    runner.responses[("list",)] = listed

    install(config, launchctl)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_install_verification_failure_cleanup_error_is_logged(home, runner, launchctl, monkeypatch, caplog):
    config = make_config()
    runner.respond("list", output="")

    def refuse(self, missing_ok=False):
        msg = "Operation not permitted"
        raise PermissionError(msg)

    monkeypatch.setattr(Path, "unlink", refuse)
    with caplog.at_level("WARNING", logger="launchctlutil.service"), pytest.raises(InstallVerificationError):
        install(config, launchctl)
    assert "Could not remove" in caplog.text
    assert "Operation not permitted" in caplog.text

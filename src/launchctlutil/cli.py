from __future__ import annotations

import argparse
import json
import logging
import plistlib
import sys
from pathlib import Path

from launchctlutil.builder import ConfigurationBuilder
from launchctlutil.configuration import config_file_path
from launchctlutil.errors import LaunchctlCommandError, LaunchdServiceError
from launchctlutil.kind import Kind
from launchctlutil.launchctl import LaunchctlClient
from launchctlutil.logging_setup import LOG_LEVELS, configure_logging
from launchctlutil.service import current_status, install, remove, start, stop
from launchctlutil.status import Status, StatusDetails

logger = logging.getLogger(__name__)


def _client(args: argparse.Namespace) -> LaunchctlClient:
    return LaunchctlClient(Path(args.launchctl).expanduser() if args.launchctl else None)


def _env_pair(value: str) -> tuple[str, str]:
    name, sep, val = value.partition("=")
    if not sep or not name:
        msg = f"expected NAME=VALUE, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return name, val


def _octal(value: str) -> int:
    try:
        return int(value, 8)
    except ValueError as e:
        msg = f"expected an octal umask such as 022, got {value!r}"
        raise argparse.ArgumentTypeError(msg) from e


def _builder_from_args(args: argparse.Namespace) -> ConfigurationBuilder:
    builder = ConfigurationBuilder().set_label(args.label).set_kind(Kind(args.kind))
    if args.command:
        builder.set_command(args.command[0])
        for arg in args.command[1:]:
            builder.add_argument(arg)
    for name, value in args.env:
        builder.add_environment_variable(name, value)

    # Logging preferences
    if args.log_dir:
        builder.set_log_parent_path(Path(args.log_dir).expanduser())
    if args.stdout_log:
        builder.set_standard_out_path(Path(args.stdout_log).expanduser())
    if args.stderr_log:
        builder.set_standard_error_path(Path(args.stderr_log).expanduser())
    if args.working_directory:
        builder.set_working_directory(Path(args.working_directory).expanduser())

    # Identity
    if args.user:
        builder.set_user_name(args.user)
    if args.group:
        builder.set_group_name(args.group)
    if args.init_groups is not None:
        builder.set_init_groups(args.init_groups)
    if args.umask is not None:
        builder.set_umask(args.umask)

    # Time
    if args.start_interval is not None:
        builder.set_start_interval(args.start_interval)
    if args.minute is not None:
        builder.set_start_calendar_interval_minute(args.minute)
    for expr in args.cron:
        builder.add_cron(expr)

    # Behavior
    if args.run_at_load is not None:
        builder.set_run_at_load(args.run_at_load)
    if args.keep_alive:
        builder.set_keep_alive()
    if args.throttle_interval is not None:
        builder.set_throttle_interval(args.throttle_interval)
    return builder


def _cmd_render(args: argparse.Namespace) -> int:
    config = _builder_from_args(args).build()
    if args.output:
        Path(args.output).expanduser().write_text(config.contents, encoding="utf-8")
    else:
        sys.stdout.write(config.contents)
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    with Path(args.path).open("rb") as f:
        plist = plistlib.load(f)
    print(json.dumps(plist, indent=2, default=str))
    return 0


def _cmd_install(args: argparse.Namespace) -> int:
    config = _builder_from_args(args).build()
    install(config, _client(args))
    print(config.file_path())
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    kind = Kind(args.kind)
    plist_path = Path(args.plist_path).expanduser() if args.plist_path else config_file_path(args.label, kind)
    remove(plist_path, kind, _client(args))
    return 0


def _cmd_start(args: argparse.Namespace) -> int:
    start(args.label, Kind(args.kind), _client(args))
    return 0


def _cmd_stop(args: argparse.Namespace) -> int:
    stop(args.label, Kind(args.kind), _client(args))
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    try:
        details = current_status(args.label, _client(args))
    except LaunchctlCommandError as e:
        logger.error("%s", e)
        details = StatusDetails(status=Status.UNKNOWN)
        print(details.model_dump_json(indent=2))
        return 1
    print(details.model_dump_json(indent=2))
    return 0


def _add_kind_opt(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--kind",
        choices=[k.value for k in Kind],
        default=Kind.USER_AGENT.value,
        help="service scope (default: user_agent)",
    )


def _add_builder_opts(p: argparse.ArgumentParser) -> None:
    p.add_argument("label", help="service label")
    p.add_argument("command", nargs=argparse.REMAINDER, help="ProgramArguments: command and its args")
    _add_kind_opt(p)
    p.add_argument("--env", action="append", type=_env_pair, metavar="NAME=VALUE", default=[], help="add an environment variable")
    p.add_argument("--log-dir", help="directory for a combined <label>.log (overrides --stdout-log/--stderr-log)")
    p.add_argument("--stdout-log", help="explicit stdout log path")
    p.add_argument("--stderr-log", help="explicit stderr log path")
    p.add_argument("--working-directory", help="set WorkingDirectory")
    p.add_argument("--user", help="run as this user (UserName)")
    p.add_argument("--group", help="run as this group (GroupName)")
    p.add_argument("--init-groups", action=argparse.BooleanOptionalAction, default=None, help="set InitGroups")
    p.add_argument("--umask", type=_octal, help="octal umask, e.g. 022")
    p.add_argument("--start-interval", type=int, help="set StartInterval (seconds)")
    p.add_argument("--minute", type=int, help="run at this minute of every hour")
    p.add_argument("--cron", action="append", default=[], help='add a cron expression, e.g. "0 6 * * *"')
    p.add_argument("--run-at-load", action=argparse.BooleanOptionalAction, default=None, help="set RunAtLoad")
    p.add_argument("--keep-alive", action="store_true", help="set KeepAlive=true")
    p.add_argument("--throttle-interval", type=int, help="ThrottleInterval seconds")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="launchctlutil")
    parser.add_argument("--launchctl", help="path to the launchctl binary (default: $LAUNCHCTL_PATH or /bin/launchctl)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_render = sub.add_parser("render", help="print the plist a service would be installed with")
    _add_builder_opts(p_render)
    p_render.add_argument("--output", help="write the plist here instead of stdout")
    p_render.set_defaults(func=_cmd_render)

    p_inspect = sub.add_parser("inspect", help="display plist as JSON")
    p_inspect.add_argument("path", help="path to plist file")
    p_inspect.set_defaults(func=_cmd_inspect)

    p_install = sub.add_parser("install", help="write plist and load via launchctl")
    _add_builder_opts(p_install)
    p_install.set_defaults(func=_cmd_install)

    p_remove = sub.add_parser("remove", help="unload via launchctl and remove plist")
    p_remove.add_argument("label", help="service label")
    _add_kind_opt(p_remove)
    p_remove.add_argument("--plist-path", help="path to plist if not the default for --kind")
    p_remove.set_defaults(func=_cmd_remove)

    for name, func, help_text in (
        ("start", _cmd_start, "start a loaded service"),
        ("stop", _cmd_stop, "stop a running service"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("label", help="service label")
        _add_kind_opt(p)
        p.set_defaults(func=func)

    p_status = sub.add_parser("status", help="show service status as JSON")
    p_status.add_argument("label", help="service label")
    p_status.set_defaults(func=_cmd_status)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except (LaunchdServiceError, ValueError) as e:
        print(f"launchctlutil: error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

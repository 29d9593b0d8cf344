# npm_runner/cli.py
from __future__ import annotations

"""
Command-line entry point.

Examples:
  $ npm-runner install
  $ npm-runner install gulp --global
  $ npm-runner --package-path web/package.json install --production
  $ npm-runner run-script test -- --reporter dot
  $ npm-runner run-script build --dry-run

Everything after the first bare `--` is passed through: as extra npm
arguments for `install`, as script arguments for `run-script`.

Exit status is npm's own exit code. Errors raised before npm runs map to:
  2   invalid settings (e.g. empty script name)
  127 npm not found
  1   npm could not be started or timed out
A signal-killed npm exits with 128 + signal number, like a shell.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .config import load_env_variables
from .errors import ConfigurationError, ProcessFailed, ProcessLaunchError, ToolNotFound
from .logging_utils import configure_logging
from .node import NpmRunner, resolve_package_directory
from .settings import InstallSettings, RunScriptSettings
from .tool import LocalFileSystem, ProcessEnvironment

logger = logging.getLogger(__name__)

EXIT_CONFIGURATION = 2
EXIT_NOT_FOUND = 127
EXIT_FAILURE = 1


def _split_passthrough(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split argv at the first bare '--'."""
    if "--" in argv:
        i = argv.index("--")
        return argv[:i], argv[i + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="npm-runner", description="Run npm install / run-script with structured options.")
    parser.add_argument("--package-path", default=None, help="package.json or package directory (default: current directory)")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    parser.add_argument("--json-logs", action="store_true", default=None, help="emit JSONL log records")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--ignore-exit-code", action="store_true", help="return npm's exit code instead of failing")
    common.add_argument("--timeout", type=float, default=None, help="kill npm after this many seconds")
    common.add_argument("--tool-path", default=None, help="explicit npm executable")
    common.add_argument("--dry-run", action="store_true", help="print the command line and exit")

    sub = parser.add_subparsers(dest="command", required=True)

    p_install = sub.add_parser("install", parents=[common], help="npm install")
    p_install.add_argument("package", nargs="?", default=None)
    p_install.add_argument("--global", dest="is_global", action="store_true")
    p_install.add_argument("--save", action="store_true")
    p_install.add_argument("--save-dev", action="store_true")
    p_install.add_argument("--production", action="store_true")
    p_install.add_argument("--force", action="store_true")

    p_run = sub.add_parser("run-script", aliases=["run"], parents=[common], help="npm run-script")
    p_run.add_argument("script_name")
    p_run.add_argument("--npm-arg", action="append", default=[], help="extra argument for npm itself (repeatable)")

    return parser


def _package_directory(package_path: Optional[str]) -> Path:
    env = ProcessEnvironment()
    if package_path is None:
        return env.working_directory()
    return resolve_package_directory(package_path, env, LocalFileSystem())


def _exit_status(exit_code: Optional[int]) -> int:
    """Map npm's exit code to ours; a negative code means killed by that signal."""
    if exit_code is None:
        return EXIT_FAILURE
    if exit_code < 0:
        return 128 + (-exit_code)
    return exit_code


def _apply_common(settings, args: argparse.Namespace) -> None:
    if args.ignore_exit_code:
        settings.ignoring_exit_code()
    if args.timeout is not None:
        settings.with_timeout(args.timeout)
    if args.tool_path:
        settings.with_tool_path(args.tool_path)


def main(argv: Optional[List[str]] = None, runner: Optional[NpmRunner] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    own, passthrough = _split_passthrough(list(argv))
    args = build_parser().parse_args(own)

    try:
        if runner is None:
            load_env_variables(_package_directory(args.package_path))
            runner = NpmRunner(args.package_path)
        log_cfg = runner.config.get("logging") or {}
        structured = args.json_logs if args.json_logs is not None else bool(log_cfg.get("structured"))
        configure_logging(verbose=args.verbose or bool(log_cfg.get("verbose")), structured=structured)
        logger.debug("npm-runner: working directory %s", runner.working_directory)

        if args.command == "install":
            def configure(s: InstallSettings) -> None:
                if args.package:
                    s.package(args.package)
                s.globally(args.is_global).saving(args.save).saving_dev(args.save_dev)
                s.for_production(args.production).force(args.force)
                for extra in passthrough:
                    s.with_npm_argument(extra)
                _apply_common(s, args)

            if args.dry_run:
                print(runner.install_arguments(configure).render())
                return 0
            return _exit_status(runner.install(configure))

        def configure_run(s: RunScriptSettings) -> None:
            for extra in args.npm_arg:
                s.with_npm_argument(extra)
            for extra in passthrough:
                s.with_argument(extra)
            _apply_common(s, args)

        if args.dry_run:
            print(runner.run_script_arguments(args.script_name, configure_run).render())
            return 0
        return _exit_status(runner.run_script(args.script_name, configure_run))

    except ConfigurationError as e:
        print(f"npm-runner: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except ToolNotFound as e:
        print(f"npm-runner: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except ProcessFailed as e:
        print(f"npm-runner: {e}", file=sys.stderr)
        return _exit_status(e.exit_code)
    except ProcessLaunchError as e:
        print(f"npm-runner: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())

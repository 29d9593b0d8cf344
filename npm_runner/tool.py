# npm_runner/tool.py
"""
Generic "run an external tool" layer.

ToolInvoker composes four small capabilities instead of relying on subclass
overrides:

  - FileSystem:      path checks (exists / is_file / is_dir)
  - ToolLocator:     ordered candidate names -> resolved path or None
  - ProcessExecutor: (executable, argv, cwd) -> exit code, blocking
  - Environment:     ambient working directory

The default implementations below talk to the real machine; tests inject
fakes for any of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Union

from .arguments import ArgumentBuilder
from .errors import ProcessFailed, ProcessLaunchError, ProcessTimedOut, ToolNotFound
from .runner import resolve_binary, run_command
from .settings import NpmSettings

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...


class ToolLocator(Protocol):
    def resolve(self, candidates: Sequence[str]) -> Optional[str]: ...


class ProcessExecutor(Protocol):
    def run(
        self,
        executable: str,
        arguments: List[str],
        cwd: Path,
        *,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> int: ...


class Environment(Protocol):
    def working_directory(self) -> Path: ...


class LocalFileSystem:
    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()


class ProcessEnvironment:
    def working_directory(self) -> Path:
        return Path.cwd()


class PathToolLocator:
    """
    Resolve candidates via PATH (shutil.which). Directories in `extra_path`
    (os.pathsep-separated) are searched before PATH for every candidate.
    """

    def __init__(self, extra_path: Optional[str] = None):
        self.extra_path = extra_path or None

    def resolve(self, candidates: Sequence[str]) -> Optional[str]:
        for name in candidates:
            if self.extra_path:
                found = resolve_binary(name, search_path=self.extra_path)
                if found:
                    return found
            found = resolve_binary(name)
            if found:
                logger.debug("resolved %s -> %s", name, found)
                return found
            logger.debug("candidate not found: %s", name)
        return None


class SubprocessExecutor:
    """ProcessExecutor backed by runner.run_command; output streams to the console."""

    def __init__(self, subprocess_module=None):
        self.subprocess_module = subprocess_module

    def run(
        self,
        executable: str,
        arguments: List[str],
        cwd: Path,
        *,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> int:
        res = run_command(
            [executable, *arguments],
            cwd=str(cwd),
            timeout=timeout,
            env=env,
            capture_output=False,
            subprocess_module=self.subprocess_module,
        )
        if res["timed_out"]:
            raise ProcessTimedOut(float(timeout or 0))
        if res["missing_executable"] or res["launch_error"]:
            raise ProcessLaunchError(res["error"] or "failed to start process")
        return int(res["returncode"])


@dataclass
class ToolInvoker:
    """
    Resolve executable and working directory, run once, report the outcome.

    working_directory is the caller's explicit package directory; when None
    the environment's current directory is used.
    """

    tool_name: str
    executable_names: Sequence[str]
    file_system: FileSystem
    environment: Environment
    locator: ToolLocator
    executor: ProcessExecutor
    working_directory: Optional[Path] = None

    def resolve_working_directory(self) -> Path:
        if self.working_directory is None:
            return self.environment.working_directory()
        wd = Path(self.working_directory)
        if not wd.is_absolute():
            wd = self.environment.working_directory() / wd
        return wd

    def resolve_executable(self, settings: NpmSettings, cwd: Path, command: Optional[str] = None) -> str:
        if settings.tool_path is not None:
            tool_path = Path(settings.tool_path)
            if not tool_path.is_absolute():
                tool_path = self.environment.working_directory() / tool_path
            if self.file_system.is_file(tool_path):
                return str(tool_path)
            raise ToolNotFound(self.tool_name, [str(tool_path)], cwd=cwd, command=command)

        resolved = self.locator.resolve(list(self.executable_names))
        if not resolved:
            raise ToolNotFound(self.tool_name, self.executable_names, cwd=cwd, command=command)
        return resolved

    def run(self, settings: NpmSettings, args: ArgumentBuilder) -> int:
        cwd = self.resolve_working_directory()
        executable = self.resolve_executable(settings, cwd, command=args.render())
        command = f"{_quote_path(executable)} {args.render()}".rstrip()

        logger.info(
            "%s: running %s",
            self.tool_name,
            command,
            extra={"meta": {"command": command, "cwd": str(cwd), "tool": self.tool_name}},
        )
        try:
            exit_code = self.executor.run(
                executable,
                args.to_list(),
                cwd,
                env=dict(settings.environment_variables) or None,
                timeout=settings.timeout,
            )
        except ProcessTimedOut as e:
            raise ProcessTimedOut(e.timeout, command=command, cwd=cwd) from e
        except ProcessLaunchError as e:
            raise ProcessLaunchError(e.reason, command=command, cwd=cwd) from e

        if exit_code != 0:
            if settings.ignore_exit_code:
                logger.warning("%s: exit code %s ignored for %s", self.tool_name, exit_code, command)
            else:
                raise ProcessFailed(exit_code, command=command, cwd=cwd)
        return exit_code


def _quote_path(path: Union[str, Path]) -> str:
    text = str(path)
    return f'"{text}"' if any(ch.isspace() for ch in text) else text


__all__ = [
    "FileSystem",
    "ToolLocator",
    "ProcessExecutor",
    "Environment",
    "LocalFileSystem",
    "ProcessEnvironment",
    "PathToolLocator",
    "SubprocessExecutor",
    "ToolInvoker",
]

# npm_runner/errors.py
"""
Error taxonomy for npm invocations.

Everything derives from NpmRunnerError so a build script can catch the whole
family in one clause. Each error also derives from the closest builtin so
callers that already handle ValueError / FileNotFoundError / OSError keep
working.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union


def _context(command: Optional[str], cwd: Optional[Union[str, Path]]) -> str:
    parts = []
    if command:
        parts.append(f"command='{command}'")
    if cwd is not None:
        parts.append(f"cwd='{cwd}'")
    return (" (" + " ".join(parts) + ")") if parts else ""


class NpmRunnerError(Exception):
    """Base class for all npm_runner failures."""


class ConfigurationError(NpmRunnerError, ValueError):
    """Caller-supplied settings are structurally invalid; raised before any process starts."""


class ToolNotFound(NpmRunnerError, FileNotFoundError):
    """None of the candidate executables could be resolved."""

    def __init__(
        self,
        tool_name: str,
        candidates: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        command: Optional[str] = None,
    ):
        self.tool_name = tool_name
        self.candidates = list(candidates)
        self.cwd = cwd
        self.command = command
        tried = ", ".join(self.candidates) or "<none>"
        super().__init__(f"{tool_name}: could not locate executable (tried: {tried}){_context(command, cwd)}")


class ProcessLaunchError(NpmRunnerError, OSError):
    """The OS refused to start the resolved executable."""

    def __init__(self, message: str, command: Optional[str] = None, cwd: Optional[Union[str, Path]] = None):
        self.reason = message
        self.command = command
        self.cwd = cwd
        super().__init__(f"{message}{_context(command, cwd)}")


class ProcessFailed(NpmRunnerError):
    """The process ran and exited with a non-zero code."""

    def __init__(
        self,
        exit_code: Optional[int],
        command: Optional[str] = None,
        cwd: Optional[Union[str, Path]] = None,
        message: Optional[str] = None,
    ):
        self.exit_code = exit_code
        self.command = command
        self.cwd = cwd
        text = message or f"process exited with code {exit_code}"
        super().__init__(f"{text}{_context(command, cwd)}")


class ProcessTimedOut(ProcessFailed):
    """The executor killed the process after its timeout elapsed."""

    def __init__(self, timeout: float, command: Optional[str] = None, cwd: Optional[Union[str, Path]] = None):
        self.timeout = timeout
        super().__init__(None, command=command, cwd=cwd, message=f"process timed out after {timeout}s")


__all__ = [
    "NpmRunnerError",
    "ConfigurationError",
    "ToolNotFound",
    "ProcessLaunchError",
    "ProcessFailed",
    "ProcessTimedOut",
]

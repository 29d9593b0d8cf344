# npm_runner/__init__.py
"""
npm_runner package public surface.

Builds npm command lines from structured settings and runs them through a
small set of injectable capabilities (file system, tool locator, process
executor, environment).

    from npm_runner import npm
    npm("web/package.json").install(lambda s: s.for_production())
"""

from __future__ import annotations

from .arguments import ArgumentBuilder
from .errors import (
    ConfigurationError,
    NpmRunnerError,
    ProcessFailed,
    ProcessLaunchError,
    ProcessTimedOut,
    ToolNotFound,
)
from .node import NpmRunner, npm
from .settings import InstallSettings, NpmSettings, RunScriptSettings
from .tool import ToolInvoker

__all__ = [
    "ArgumentBuilder",
    "NpmSettings",
    "InstallSettings",
    "RunScriptSettings",
    "ToolInvoker",
    "NpmRunner",
    "npm",
    "NpmRunnerError",
    "ConfigurationError",
    "ToolNotFound",
    "ProcessFailed",
    "ProcessLaunchError",
    "ProcessTimedOut",
]

# npm_runner/settings.py
"""
Settings objects for npm subcommands.

A settings object is created fresh for each call, handed once to the caller's
configure step (every mutator returns self so calls can be chained), then
serialized into an ArgumentBuilder via evaluate(). Serialization order is
fixed so the same option state always yields the same argument sequence.

  npm.install(lambda s: s.package("gulp").globally())     -> install gulp --global
  npm.run_script("test", lambda s: s.with_argument("-x")) -> run-script test -- -x
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from .arguments import ArgumentBuilder
from .errors import ConfigurationError

# Canonical long form; npm also accepts -g.
GLOBAL_FLAG = "--global"
SCRIPT_ARGUMENT_SEPARATOR = "--"


@dataclass
class NpmSettings(ABC):
    """Tool-level options shared by every npm subcommand."""

    tool_path: Optional[Path] = None
    environment_variables: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None
    ignore_exit_code: Optional[bool] = None
    extra_arguments: List[str] = field(default_factory=list)

    def with_tool_path(self, path: Union[str, Path]) -> "NpmSettings":
        self.tool_path = Path(path)
        return self

    def with_environment_variable(self, name: str, value: str) -> "NpmSettings":
        self.environment_variables[str(name)] = str(value)
        return self

    def with_timeout(self, seconds: float) -> "NpmSettings":
        if float(seconds) <= 0:
            raise ConfigurationError(f"timeout must be positive, got {seconds!r}")
        self.timeout = float(seconds)
        return self

    def ignoring_exit_code(self, ignore: bool = True) -> "NpmSettings":
        self.ignore_exit_code = bool(ignore)
        return self

    def with_npm_argument(self, argument: str) -> "NpmSettings":
        self.extra_arguments.append(str(argument))
        return self

    @abstractmethod
    def evaluate(self, args: ArgumentBuilder) -> None:
        """Append this subcommand's tokens to `args`."""


@dataclass
class InstallSettings(NpmSettings):
    package_name: Optional[str] = None
    is_global: bool = False
    save_dependency: bool = False
    save_dev_dependency: bool = False
    production: bool = False
    force_install: bool = False

    def package(self, name: str) -> "InstallSettings":
        self.package_name = name
        return self

    def globally(self, enabled: bool = True) -> "InstallSettings":
        self.is_global = enabled
        return self

    def saving(self, enabled: bool = True) -> "InstallSettings":
        self.save_dependency = enabled
        return self

    def saving_dev(self, enabled: bool = True) -> "InstallSettings":
        self.save_dev_dependency = enabled
        return self

    def for_production(self, enabled: bool = True) -> "InstallSettings":
        self.production = enabled
        return self

    def force(self, enabled: bool = True) -> "InstallSettings":
        self.force_install = enabled
        return self

    def evaluate(self, args: ArgumentBuilder) -> None:
        args.append("install")
        if self.package_name:
            args.append(self.package_name)
        if self.is_global:
            args.append(GLOBAL_FLAG)
        if self.save_dependency:
            args.append("--save")
        if self.save_dev_dependency:
            args.append("--save-dev")
        if self.production:
            args.append("--production")
        if self.force_install:
            args.append("--force")
        args.extend(self.extra_arguments)


@dataclass
class RunScriptSettings(NpmSettings):
    script_name: str = ""
    script_arguments: List[str] = field(default_factory=list)

    def with_argument(self, argument: str) -> "RunScriptSettings":
        self.script_arguments.append(str(argument))
        return self

    def validate(self) -> None:
        if not isinstance(self.script_name, str) or not self.script_name.strip():
            raise ConfigurationError("script name must be a non-empty string")

    def evaluate(self, args: ArgumentBuilder) -> None:
        self.validate()
        args.append("run-script")
        args.append(self.script_name)
        args.extend(self.extra_arguments)
        if self.script_arguments:
            args.append(SCRIPT_ARGUMENT_SEPARATOR)
            args.extend(self.script_arguments)


__all__ = [
    "GLOBAL_FLAG",
    "SCRIPT_ARGUMENT_SEPARATOR",
    "NpmSettings",
    "InstallSettings",
    "RunScriptSettings",
]

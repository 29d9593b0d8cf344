# npm_runner/node.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar, Union

from .arguments import ArgumentBuilder
from .config import load_project_config
from .settings import InstallSettings, NpmSettings, RunScriptSettings
from .tool import (
    Environment,
    FileSystem,
    LocalFileSystem,
    PathToolLocator,
    ProcessEnvironment,
    ProcessExecutor,
    SubprocessExecutor,
    ToolInvoker,
    ToolLocator,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "Npm Runner"
# Windows ships npm as a .cmd shim; try it before the bare name.
NPM_EXECUTABLE_NAMES = ("npm.cmd", "npm")

S = TypeVar("S", bound=NpmSettings)


def resolve_package_directory(
    package_path: Union[str, Path],
    environment: Environment,
    file_system: FileSystem,
) -> Path:
    """
    Turn a package path into the directory npm should run in.

    Relative paths are anchored at the environment's working directory. A file
    (e.g. .../package.json) yields its parent directory. A path that does not
    exist yet is treated as a file when it has a suffix.
    """
    path = Path(package_path)
    if not path.is_absolute():
        path = environment.working_directory() / path
    if file_system.is_file(path):
        return path.parent
    if not file_system.exists(path) and path.suffix:
        return path.parent
    return path


class NpmRunner:
    """
    Drive npm from a build script.

      npm = NpmRunner("web/package.json")
      npm.install()
      npm.install(lambda s: s.package("gulp").globally())
      npm.run_script("build", lambda s: s.with_argument("--prod"))

    Each call builds fresh settings, lets `configure` mutate them, renders the
    argument list and runs npm once, blocking until it exits. The return value
    is npm's exit code (always 0 unless the settings ignore exit codes).
    """

    def __init__(
        self,
        package_path: Optional[Union[str, Path]] = None,
        *,
        file_system: Optional[FileSystem] = None,
        environment: Optional[Environment] = None,
        locator: Optional[ToolLocator] = None,
        executor: Optional[ProcessExecutor] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.file_system = file_system or LocalFileSystem()
        self.environment = environment or ProcessEnvironment()
        self._package_directory: Optional[Path] = None
        if package_path is not None:
            self._package_directory = resolve_package_directory(package_path, self.environment, self.file_system)

        if config is None:
            config, _ = load_project_config(self.working_directory)
        self.config = config
        npm_cfg = (config.get("npm") or {}) if config else {}

        self._invoker = ToolInvoker(
            tool_name=TOOL_NAME,
            executable_names=NPM_EXECUTABLE_NAMES,
            file_system=self.file_system,
            environment=self.environment,
            locator=locator or PathToolLocator(extra_path=npm_cfg.get("extra_path")),
            executor=executor or SubprocessExecutor(),
            working_directory=self._package_directory,
        )

    @property
    def working_directory(self) -> Path:
        if self._package_directory is not None:
            return self._package_directory
        return self.environment.working_directory()

    # --- public operations ---
    def install(self, configure: Optional[Callable[[InstallSettings], Any]] = None) -> int:
        """Run `npm install` with options from `configure`."""
        settings, args = self._prepare(InstallSettings(), configure)
        return self._invoker.run(settings, args)

    def run_script(
        self,
        script_name: str,
        configure: Optional[Callable[[RunScriptSettings], Any]] = None,
    ) -> int:
        """Run `npm run-script <script_name>`; arguments added via with_argument() follow `--`."""
        settings, args = self._prepare(RunScriptSettings(script_name=script_name), configure)
        return self._invoker.run(settings, args)

    def install_arguments(self, configure: Optional[Callable[[InstallSettings], Any]] = None) -> ArgumentBuilder:
        return self._prepare(InstallSettings(), configure)[1]

    def run_script_arguments(
        self,
        script_name: str,
        configure: Optional[Callable[[RunScriptSettings], Any]] = None,
    ) -> ArgumentBuilder:
        return self._prepare(RunScriptSettings(script_name=script_name), configure)[1]

    # --- helpers ---
    def _seed(self, settings: S) -> S:
        npm_cfg = self.config.get("npm") or {}
        if npm_cfg.get("tool_path"):
            settings.tool_path = Path(npm_cfg["tool_path"])
        if npm_cfg.get("timeout_sec"):
            settings.timeout = float(npm_cfg["timeout_sec"])
        settings.ignore_exit_code = bool(npm_cfg.get("ignore_exit_code", False))
        return settings

    def _prepare(self, settings: S, configure: Optional[Callable[[S], Any]]) -> Tuple[S, ArgumentBuilder]:
        settings = self._seed(settings)
        if configure is not None:
            configure(settings)
        args = ArgumentBuilder()
        settings.evaluate(args)
        logger.debug("%s: prepared arguments %s", TOOL_NAME, args.render())
        return settings, args


def npm(package_path: Optional[Union[str, Path]] = None, **kwargs: Any) -> NpmRunner:
    """Return an NpmRunner for `package_path` (a package.json or its directory), or the current directory."""
    return NpmRunner(package_path, **kwargs)


__all__ = ["TOOL_NAME", "NPM_EXECUTABLE_NAMES", "NpmRunner", "npm", "resolve_package_directory"]

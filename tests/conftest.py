from pathlib import Path

import pytest

from npm_runner.node import NpmRunner


class FakeFileSystem:
    def __init__(self, files=(), dirs=()):
        self.files = {Path(f) for f in files}
        self.dirs = {Path(d) for d in dirs}

    def exists(self, path):
        return Path(path) in self.files or Path(path) in self.dirs

    def is_file(self, path):
        return Path(path) in self.files

    def is_dir(self, path):
        return Path(path) in self.dirs


class FakeEnvironment:
    def __init__(self, cwd):
        self.cwd = Path(cwd)

    def working_directory(self):
        return self.cwd


class FakeLocator:
    def __init__(self, known=None):
        self.known = dict(known or {})
        self.calls = []

    def resolve(self, candidates):
        self.calls.append(list(candidates))
        for name in candidates:
            if name in self.known:
                return self.known[name]
        return None


class RecordingExecutor:
    def __init__(self, exit_code=0, error=None):
        self.exit_code = exit_code
        self.error = error
        self.calls = []

    def run(self, executable, arguments, cwd, *, env=None, timeout=None):
        self.calls.append(
            {"executable": executable, "arguments": list(arguments), "cwd": cwd, "env": env, "timeout": timeout}
        )
        if self.error is not None:
            raise self.error
        return self.exit_code


WORK = "/work"
NPM_PATH = "/usr/local/bin/npm"


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def locator():
    return FakeLocator({"npm": NPM_PATH})


@pytest.fixture
def make_runner(executor, locator):
    def _make(package_path=None, files=(), dirs=(), config=None, **overrides):
        kwargs = dict(
            file_system=FakeFileSystem(files=files, dirs=dirs),
            environment=FakeEnvironment(WORK),
            locator=locator,
            executor=executor,
            config=config if config is not None else {"npm": {}},
        )
        kwargs.update(overrides)
        return NpmRunner(package_path, **kwargs)

    return _make

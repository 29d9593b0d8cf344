import pytest

import npm_runner.cli as cli
from conftest import FakeLocator
from npm_runner.errors import ProcessLaunchError


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kw: calls.append(kw))
    monkeypatch.setattr(cli, "load_env_variables", lambda *a, **kw: None)
    return calls


def test_install_with_flags(make_runner, executor):
    code = cli.main(["install", "gulp", "--global", "--save-dev"], runner=make_runner())
    assert code == 0
    assert executor.calls[0]["arguments"] == ["install", "gulp", "--global", "--save-dev"]


def test_install_passthrough_goes_to_npm(make_runner, executor):
    cli.main(["install", "--production", "--", "--no-audit"], runner=make_runner())
    assert executor.calls[0]["arguments"] == ["install", "--production", "--no-audit"]


def test_run_script_passthrough_goes_to_script(make_runner, executor):
    cli.main(["run-script", "arguments", "--npm-arg=--silent", "--", "-debug", "arg-value.file"], runner=make_runner())
    assert executor.calls[0]["arguments"] == ["run-script", "arguments", "--silent", "--", "-debug", "arg-value.file"]


def test_run_alias(make_runner, executor):
    cli.main(["run", "hello"], runner=make_runner())
    assert executor.calls[0]["arguments"] == ["run-script", "hello"]


def test_dry_run_prints_without_executing(make_runner, executor, capsys):
    code = cli.main(["install", "gulp", "--global", "--dry-run"], runner=make_runner())
    assert code == 0
    assert capsys.readouterr().out.strip() == "install gulp --global"
    assert executor.calls == []


def test_options_forwarded(make_runner, executor):
    cli.main(["install", "--timeout", "15"], runner=make_runner())
    assert executor.calls[0]["timeout"] == 15.0


def test_process_failure_returns_npm_exit_code(make_runner, executor, capsys):
    executor.exit_code = 4
    assert cli.main(["run-script", "test"], runner=make_runner()) == 4
    assert "exited with code 4" in capsys.readouterr().err


def test_ignore_exit_code_flag(make_runner, executor):
    executor.exit_code = 4
    assert cli.main(["run-script", "test", "--ignore-exit-code"], runner=make_runner()) == 4


def test_empty_script_name_is_configuration_error(make_runner, executor, capsys):
    assert cli.main(["run-script", ""], runner=make_runner()) == cli.EXIT_CONFIGURATION
    assert executor.calls == []
    assert "script name" in capsys.readouterr().err


def test_invalid_timeout_is_configuration_error(make_runner, executor):
    assert cli.main(["install", "--timeout", "0"], runner=make_runner()) == cli.EXIT_CONFIGURATION
    assert executor.calls == []


def test_missing_npm(make_runner):
    assert cli.main(["install"], runner=make_runner(locator=FakeLocator())) == cli.EXIT_NOT_FOUND


def test_launch_error(make_runner, executor):
    executor.error = ProcessLaunchError("permission denied")
    assert cli.main(["install"], runner=make_runner()) == cli.EXIT_FAILURE


def test_logging_flags(make_runner, quiet_logging):
    cli.main(["--verbose", "--json-logs", "install", "--dry-run"], runner=make_runner())
    assert quiet_logging == [{"verbose": True, "structured": True}]


def test_logging_defaults_follow_config(make_runner, quiet_logging):
    runner = make_runner(config={"npm": {}, "logging": {"structured": True}})
    cli.main(["install", "--dry-run"], runner=runner)
    assert quiet_logging == [{"verbose": False, "structured": True}]


def test_signal_killed_npm_maps_to_shell_status(make_runner, executor):
    executor.exit_code = -15
    assert cli.main(["run-script", "test", "--ignore-exit-code"], runner=make_runner()) == 143


def test_signal_killed_npm_failure_maps_to_shell_status(make_runner, executor):
    executor.exit_code = -9
    assert cli.main(["install"], runner=make_runner()) == 137


def test_package_dotenv_is_read_before_config(tmp_path, monkeypatch, quiet_logging):
    from npm_runner.config import load_env_variables

    monkeypatch.setenv("NPM_RUNNER_LOG_STRUCTURED", "x")
    monkeypatch.delenv("NPM_RUNNER_LOG_STRUCTURED")
    monkeypatch.setattr(cli, "load_env_variables", load_env_variables)
    package_dir = tmp_path / "web"
    package_dir.mkdir()
    (package_dir / "package.json").write_text("{}")
    (package_dir / ".env").write_text("NPM_RUNNER_LOG_STRUCTURED=1\n")
    monkeypatch.chdir(tmp_path)
    assert cli.main(["--package-path", str(package_dir), "install", "--dry-run"]) == 0
    assert quiet_logging == [{"verbose": False, "structured": True}]

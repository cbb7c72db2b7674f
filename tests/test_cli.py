"""CLI tests with the host replaced by a recording shell."""

import pytest
from click.testing import CliRunner

import stackup.cli as cli_module
from stackup.catalog import default_plan
from stackup.cli import cli

from .fakes import FakeShell


@pytest.fixture
def shells(monkeypatch):
    """Collects the FakeShell built for each run."""
    built = []

    def build_shell(config):
        shell = FakeShell(default_plan(config))
        built.append(shell)
        return shell

    monkeypatch.setattr(cli_module, "build_shell", build_shell)
    return built


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, tmp_path, env, args=(), input=None):
    return runner.invoke(
        cli,
        ["--env-file", str(tmp_path / "missing.env"), "--project-dir", str(tmp_path), *args],
        env={"DB_NAME": None, "DB_USER": None, "DB_PASS": None, "DOMAIN": None, "CERTBOT_EMAIL": None, **env},
        input=input,
    )


def test_no_arguments_runs_everything(runner, shells, tmp_path):
    built = shells

    result = _invoke(runner, tmp_path, {"DB_PASS": "secret123", "DOMAIN": "example.com"})

    assert result.exit_code == 0, result.output
    assert "Bootstrap completed successfully!" in result.output
    assert "configured for example.com" in result.output
    [shell] = built
    assert "sudo certbot --apache --non-interactive --agree-tos --register-unsafely-without-email -d example.com -d www.example.com" in shell.ran


def test_secret_never_printed(runner, shells, tmp_path):
    result = _invoke(runner, tmp_path, {"DB_PASS": "secret123", "DOMAIN": "example.com"}, args=["--debug"])

    assert result.exit_code == 0, result.output
    assert "secret123" not in result.output


def test_domain_from_environment_is_not_prompted(runner, shells, tmp_path):
    result = _invoke(runner, tmp_path, {"DOMAIN": "example.com"}, input="typed-secret\n")

    assert result.exit_code == 0, result.output
    assert "Enter MySQL password for user 'project_user'" in result.output
    assert "Enter your domain" not in result.output
    assert "typed-secret" not in result.output


def test_env_file_supplies_values(runner, shells, tmp_path):
    built = shells
    env_file = tmp_path / "stack.env"
    env_file.write_text("DB_NAME=shop\nDB_PASS=from-file\nDOMAIN=example.org\n")

    result = runner.invoke(
        cli,
        ["--env-file", str(env_file), "--project-dir", str(tmp_path)],
        env={"DB_NAME": None, "DB_USER": None, "DB_PASS": None, "DOMAIN": None},
    )

    assert result.exit_code == 0, result.output
    assert f"Loaded configuration from {env_file}" in result.output
    assert "from-file" not in result.output
    [shell] = built
    assert any("CREATE DATABASE IF NOT EXISTS `shop`;" in sql for sql in shell.stdin_seen)


def test_first_failure_exits_non_zero(runner, monkeypatch, tmp_path):
    built = []

    def build_shell(config):
        shell = FakeShell(default_plan(config), fail={"apt update"})
        built.append(shell)
        return shell

    monkeypatch.setattr(cli_module, "build_shell", build_shell)

    result = _invoke(runner, tmp_path, {"DB_PASS": "secret123", "DOMAIN": "example.com"})

    assert result.exit_code == 1
    assert "STEP FAILED: system: update packages" in result.output
    assert "Bootstrap completed" not in result.output
    [shell] = built
    assert shell.ran == ["sudo apt update -q"]


def test_invalid_configuration_exits_2(runner, shells, tmp_path):
    built = shells

    result = _invoke(runner, tmp_path, {"DB_PASS": "x", "DOMAIN": "not a domain"})

    assert result.exit_code == 2
    assert built == []


def test_plan_lists_steps_without_running(runner, shells, tmp_path):
    built = shells

    result = runner.invoke(cli, ["plan"])

    assert result.exit_code == 0
    lines = [line.strip() for line in result.output.splitlines() if line.strip()]
    assert lines[0] == "1. system: update packages"
    assert lines[-1] == "17. certbot: renewal timer"
    assert built == []


class InterruptedShell(FakeShell):

    def run(self, command):
        self.ran.append(self.command_line(command))
        raise KeyboardInterrupt


class TestInterruptsAndFailures:

    def test_interrupt_during_a_step_exits_130(self, runner, monkeypatch, tmp_path):
        monkeypatch.setattr(cli_module, "build_shell", lambda config: InterruptedShell(default_plan(config)))

        result = _invoke(runner, tmp_path, {"DB_PASS": "secret123", "DOMAIN": "example.com"})

        assert result.exit_code == 130
        assert "Interrupted by user" in result.output
        assert "Bootstrap completed" not in result.output

    def test_abort_at_the_password_prompt_exits_130(self, runner, shells, tmp_path):
        result = _invoke(runner, tmp_path, {"DOMAIN": "example.com"}, input="")

        assert result.exit_code == 130
        assert shells == []

    def test_failed_verification_exits_1(self, runner, monkeypatch, tmp_path):
        built = []

        def build_shell(config):
            steps = default_plan(config)
            [packages] = [s for s in steps if s.name == "system: install packages"]
            shell = FakeShell(steps)
            shell.broken_verify.add(shell.command_line(packages.verify))
            built.append(shell)
            return shell

        monkeypatch.setattr(cli_module, "build_shell", build_shell)

        result = _invoke(runner, tmp_path, {"DB_PASS": "secret123", "DOMAIN": "example.com"})

        assert result.exit_code == 1
        assert "STEP FAILED: system: install packages" in result.output
        assert "verification failed" in result.output
        assert "Bootstrap completed" not in result.output
        [shell] = built
        assert shell.ran[-1].startswith("sudo DEBIAN_FRONTEND=noninteractive apt-get install")
        assert "sudo mysql" not in shell.ran

    def test_missing_project_dir_is_rejected_before_running(self, runner, shells, tmp_path):
        result = runner.invoke(
            cli,
            ["--env-file", str(tmp_path / "missing.env"), "--project-dir", str(tmp_path / "nowhere")],
            env={"DB_PASS": "secret123", "DOMAIN": "example.com"},
        )

        assert result.exit_code == 2
        assert shells == []

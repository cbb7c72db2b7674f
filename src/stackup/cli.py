# cli.py
from __future__ import annotations

import logging
import os
import socket
import sys

import click

from stackup.catalog import default_plan
from stackup.config import (
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_ENV_FILE,
    ConfigError,
    Configuration,
    load_env_file,
    resolve_config,
)
from stackup.dsl import sh
from stackup.runner import run_steps
from stackup.shell import Shell, detect_elevation
from stackup.ui.console import Console, get_console, set_console


# Exit codes
EXIT_STEP_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def build_shell(config: Configuration) -> Shell:
    """Elevation is chosen once here; steps never decide about sudo."""
    return Shell(detect_elevation(), cwd=config.project_dir, extra_path=config.extra_path)


def collect_versions(shell: Shell) -> dict[str, str | None]:
    return {
        tool: shell.capture(sh(f"{tool} --version"))
        for tool in ("pipx", "poetry", "oci")
    }


def _load_config(env_file: str, project_dir: str) -> Configuration:
    console = get_console()
    file_values = load_env_file(env_file)
    if file_values:
        console.print_info(f"Loaded configuration from {env_file}")
    return resolve_config(os.environ, file_values, project_dir=project_dir)


@click.group(invoke_without_command=True)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and every command run)",
)
@click.option(
    "--env-file",
    default=DEFAULT_ENV_FILE,
    show_default=True,
    help="Optional KEY=VALUE file consulted after the environment",
)
@click.option(
    "--project-dir",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory holding pyproject.toml for 'poetry install'",
)
@click.pass_context
def cli(ctx, debug, env_file, project_dir):
    """stackup: converge an Ubuntu host to Apache, MySQL, Certbot, OCI CLI and Poetry."""
    console = Console(debug=debug)
    set_console(console)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["env_file"] = env_file
    ctx.obj["project_dir"] = project_dir
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.pass_context
def run(ctx):
    """Provision this host (the default when no command is given)."""
    console = get_console()

    try:
        config = _load_config(ctx.obj["env_file"], ctx.obj["project_dir"])
    except ConfigError as e:
        console.print_error(
            "Invalid configuration",
            str(e),
            suggestion="Set the value in the environment or in the env file, e.g.:\n  DOMAIN=example.com stackup",
        )
        sys.exit(EXIT_CONFIG_ERROR)
    except click.Abort:
        console.print_info("\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)

    try:
        shell = build_shell(config)
        steps = default_plan(config)

        console.print_run_started(
            host=socket.gethostname(),
            elevation=repr(shell.elevation),
            step_count=len(steps),
        )

        report = run_steps(steps, shell, console=console)

        console.print_results(report.statuses())

        if not report.ok:
            sys.exit(EXIT_STEP_FAILED)

        console.print_summary(
            db_name=config.db_name,
            db_user=config.db_user,
            domain=config.domain,
            versions=collect_versions(shell),
        )

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        console.print_exception(e)
        sys.exit(EXIT_STEP_FAILED)


@cli.command()
def plan():
    """List the provisioning steps in the order they run, without touching the host."""
    console = get_console()
    # Placeholders: step names do not depend on configuration values.
    config = Configuration(
        db_name=DEFAULT_DB_NAME,
        db_user=DEFAULT_DB_USER,
        db_pass="-",
        domain="example.com",
    )
    for index, step in enumerate(default_plan(config), start=1):
        console.print_plan_step(index, step.name)


def main():
    cli()


if __name__ == "__main__":
    main()

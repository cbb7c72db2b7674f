# catalog/python_tools.py
from __future__ import annotations

from typing import List

from ..config import Configuration
from ..dsl import command_exists, sh, step
from ..model import Step


def install_poetry() -> Step:
    # pipx gives each CLI tool its own isolated venv
    return step(
        "poetry: install",
        sh("pipx install poetry"),
        check=command_exists("poetry"),
        verify_with_check=True,
    )


def in_project_venvs() -> Step:
    """Keep the virtualenv inside the project directory (.venv/)."""
    return step(
        "poetry: in-project virtualenvs",
        sh("poetry config virtualenvs.in-project true"),
        check=sh("poetry config virtualenvs.in-project | grep -x true >/dev/null"),
        verify_with_check=True,
    )


def project_dependencies(config: Configuration) -> Step:
    cwd = str(config.project_dir)
    # Nothing to do without a pyproject.toml, or when Poetry has no pending operations.
    up_to_date = sh(
        "test ! -f pyproject.toml || "
        "(test -d .venv && poetry install --dry-run --no-interaction --no-ansi"
        " | grep -E 'No dependencies to install or update|0 installs, 0 updates, 0 removals' >/dev/null)",
        cwd=cwd,
    )
    return step(
        "poetry: project dependencies",
        sh("poetry install --no-interaction --no-ansi", cwd=cwd),
        check=up_to_date,
        verify=sh("poetry env info --path >/dev/null", cwd=cwd),
    )


def poetry_steps(config: Configuration) -> List[Step]:
    return [install_poetry(), in_project_venvs(), project_dependencies(config)]

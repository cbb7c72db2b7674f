# src/stackup/dsl.py
from __future__ import annotations

import shlex
from typing import List, Optional

from .model import Command, Step


# ---------------------------------------------------------------------
# Command helper
# ---------------------------------------------------------------------

def sh(cmd: str, *, sudo: bool = False, stdin: str | None = None, cwd: str | None = None) -> Command:
    """Create a shell command. `sudo=True` marks it for privilege elevation."""
    return Command(cmd=cmd, privileged=sudo, stdin=stdin, cwd=cwd)


# ---------------------------------------------------------------------
# Step helper
# ---------------------------------------------------------------------

def step(
    name: str,
    *commands: Command,  # allow: step("x", sh(...), sh(...))
    check: Optional[Command] = None,
    verify: Optional[Command] = None,
    verify_with_check: bool = False,
) -> Step:
    if not commands:
        raise ValueError(f"step({name!r}) must have at least one command")
    if verify is None and verify_with_check:
        verify = check
    return Step(name=name, run=tuple(commands), check=check, verify=verify)


# ---------------------------------------------------------------------
# Probes (preconditions / verifications)
# ---------------------------------------------------------------------

def command_exists(tool: str) -> Command:
    return sh(f"command -v {shlex.quote(tool)} >/dev/null 2>&1")


def packages_installed(*packages: str) -> Command:
    # dpkg -s exits non-zero if any of the packages is missing
    return sh(f"dpkg -s {shlex.join(packages)} >/dev/null 2>&1")


def service_running(unit: str) -> Command:
    u = shlex.quote(unit)
    return sh(f"systemctl is-enabled --quiet {u} && systemctl is-active --quiet {u}")


def file_contains(path: str, text: str, *, sudo: bool = False) -> Command:
    # path is left unquoted so that ~ and $HOME expand
    return sh(f"grep -qsF -- {shlex.quote(text)} {path}", sudo=sudo)


# ---------------------------------------------------------------------
# Plan helper
# ---------------------------------------------------------------------

def plan(*steps: Step) -> List[Step]:
    """Ordered list of steps. Step names must be unique."""
    seen: set[str] = set()
    for s in steps:
        if s.name in seen:
            raise ValueError(f"Duplicate step name: {s.name}")
        seen.add(s.name)
    return list(steps)

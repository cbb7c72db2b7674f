from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .model import APPLIED, FAILED, SKIPPED, Command, RunReport, Step, StepResult
from .shell import CommandFailed, Shell
from .ui.console import Console, get_console


TOOL_HINTS = {
    "sudo": "Run as root or install sudo.",
    "apt": "An Ubuntu/Debian host with apt is required.",
    "apt-get": "An Ubuntu/Debian host with apt is required.",
    "pipx": "Install pipx (apt install pipx) or fix PATH.",
    "poetry": "Install Poetry (pipx install poetry) or add ~/.local/bin to PATH.",
    "mysql": "Install mysql-server and make sure the service is running.",
    "certbot": "Install certbot and python3-certbot-apache.",
    "curl": "Install curl (apt install curl).",
    "netfilter-persistent": "Install netfilter-persistent and iptables-persistent.",
}

# bash: command not found
_NOT_FOUND = 127


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class StepFailure(Exception):
    step: str
    cmd: str
    exit_code: int | None
    reason: str = "action failed"

    def __str__(self) -> str:
        if self.exit_code is None:
            return f"step '{self.step}' {self.reason}: {self.cmd}"
        return f"step '{self.step}' {self.reason} (exit={self.exit_code}): {self.cmd}"

    @property
    def hint(self) -> Optional[str]:
        if self.exit_code != _NOT_FOUND:
            return None
        # 127 comes from bash, so it names the first word: sudo itself when present.
        for word in self.cmd.split():
            if "=" in word:
                continue
            return TOOL_HINTS.get(word, f"Install {word} or fix PATH.")
        return None


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def _run_step(step: Step, shell: Shell, console: Console) -> str:
    """
    Returns "skipped" or "applied".
    Raises StepFailure on the first failing action, an action that cannot
    be started, or a failed verification.
    """
    if step.check is not None and shell.succeeds(step.check):
        console.print_step_skipped(step.name)
        return SKIPPED

    for command in step.run:
        console.print_command(_describe(shell, command))
        try:
            shell.run(command)
        except CommandFailed as e:
            raise StepFailure(step=step.name, cmd=e.cmd, exit_code=e.exit_code) from e
        except OSError as e:
            # Missing working directory or no bash: the command never started.
            raise StepFailure(
                step=step.name,
                cmd=shell.command_line(command),
                exit_code=None,
                reason=f"could not start ({e.strerror or e})",
            ) from e

    if step.verify is not None and not shell.succeeds(step.verify):
        raise StepFailure(
            step=step.name,
            cmd=shell.command_line(step.verify),
            exit_code=None,
            reason="verification failed",
        )

    console.print_step_applied(step.name)
    return APPLIED


def _describe(shell: Shell, command: Command) -> str:
    line = shell.command_line(command)
    if command.stdin is not None:
        return f"{line} < (stdin)"
    return line


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_steps(steps: Sequence[Step], shell: Shell, *, console: Console | None = None) -> RunReport:
    """
    Run steps strictly in declared order.

    Fail-fast: the first failing step is recorded as "failed" and nothing
    after it runs. No retries and no rollback: the host stays as the last
    completed step left it.
    """
    console = console or get_console()
    report = RunReport()

    for step in steps:
        console.print_section(step.name)
        try:
            status = _run_step(step, shell, console)
        except StepFailure as e:
            _logger.debug("Step failed: %s", e)
            report.results.append(StepResult(name=step.name, status=FAILED, error=str(e)))
            console.print_failure(step.name, str(e), exit_code=e.exit_code, hint=e.hint)
            break
        report.results.append(StepResult(name=step.name, status=status))

    return report


_logger = logging.getLogger(__name__)

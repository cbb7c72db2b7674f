# shell.py
# Single gateway between the sequencer and the host.
# Steps never call subprocess themselves and never decide about sudo:
# the elevation strategy is chosen once at startup and injected here.

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABCMeta
from abc import abstractmethod
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .model import Command

# The database password reaches mysql on stdin only.
_WITHHELD_FROM_CHILDREN = frozenset({'DB_PASS'})


class Elevation(metaclass=ABCMeta):

    @abstractmethod
    def wrap(self, cmd: str) -> str:
        pass


class NoElevation(Elevation):
    """Already running as root."""

    def __repr__(self):
        return f'{NoElevation.__name__}()'

    def wrap(self, cmd: str) -> str:
        return cmd


class Sudo(Elevation):
    """Prefix privileged commands with sudo.

    >>> Sudo().wrap('apt update -q')
    'sudo apt update -q'
    >>> Sudo().wrap('DEBIAN_FRONTEND=noninteractive apt-get install -y git')
    'sudo DEBIAN_FRONTEND=noninteractive apt-get install -y git'
    """

    def __repr__(self):
        return f'{Sudo.__name__}()'

    def wrap(self, cmd: str) -> str:
        return f'sudo {cmd}'


def detect_elevation(euid: Optional[int] = None) -> Elevation:
    if euid is None:
        euid = os.geteuid()
    if euid == 0:
        return NoElevation()
    return Sudo()


class CommandFailed(Exception):

    def __init__(self, cmd: str, exit_code: int):
        super().__init__(f"Command exited with {exit_code}: {cmd}")
        self.cmd = cmd
        self.exit_code = exit_code


class Shell:
    """Run commands on the local host with bash, strictly one at a time."""

    def __init__(
            self,
            elevation: Elevation,
            *,
            cwd: str | Path = ".",
            extra_path: Sequence[str] = (),
            env: Optional[Mapping[str, str]] = None,
            ):
        self._elevation = elevation
        self._cwd = Path(cwd)
        self._extra_path = list(extra_path)
        self._base_env = dict(os.environ if env is None else env)

    def __repr__(self):
        return f'{Shell.__name__}({self._elevation!r}, cwd={str(self._cwd)!r})'

    @property
    def elevation(self) -> Elevation:
        return self._elevation

    def command_line(self, command: Command) -> str:
        if command.privileged:
            return self._elevation.wrap(command.cmd)
        return command.cmd

    def run(self, command: Command) -> None:
        """Run an action. Output goes straight to the terminal."""
        r = self._spawn(command)
        if r.returncode != 0:
            raise CommandFailed(self.command_line(command), r.returncode)

    def succeeds(self, command: Command) -> bool:
        """Run a probe. Any failure to run it counts as 'no'."""
        try:
            r = self._spawn(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            _logger.debug("Probe could not start: %s", e)
            return False
        return r.returncode == 0

    def capture(self, command: Command) -> str | None:
        try:
            r = self._spawn(command, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
        except OSError as e:
            _logger.debug("Capture could not start: %s", e)
            return None
        if r.returncode != 0:
            return None
        return r.stdout.decode(errors='replace').strip()

    def _spawn(self, command: Command, **kwargs) -> subprocess.CompletedProcess:
        line = self.command_line(command)
        cwd = (self._cwd / (command.cwd or ".")).expanduser()
        # stdin is never logged: it may hold the database password.
        _logger.info("Run: %s", line)
        if command.stdin is not None:
            kwargs['input'] = command.stdin.encode()
        else:
            # It may hang waiting for input when no input is actually needed.
            kwargs['stdin'] = subprocess.DEVNULL
        return subprocess.run(
            ['bash', '-o', 'pipefail', '-c', line],
            cwd=str(cwd),
            env=self._child_env(),
            **kwargs,
            )

    def _child_env(self) -> dict[str, str]:
        env = {k: v for k, v in self._base_env.items() if k not in _WITHHELD_FROM_CHILDREN}
        if self._extra_path:
            parts = [p for p in env.get('PATH', '').split(os.pathsep) if p]
            for entry in self._extra_path:
                if entry not in parts:
                    parts.append(entry)
            env['PATH'] = os.pathsep.join(parts)
        return env


_logger = logging.getLogger(__name__)

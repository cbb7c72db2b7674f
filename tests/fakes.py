"""Recording shell that never touches the host."""

from typing import Iterable, Optional

from stackup.model import Command, Step
from stackup.shell import CommandFailed, Shell, Sudo


class FakeShell(Shell):
    """
    Records every command instead of running it.

    Probes succeed when their command line is in `satisfied`. Running all
    actions of a known step satisfies that step's check and verify, so a
    second run against the same FakeShell sees a converged host.
    """

    def __init__(
        self,
        steps: Iterable[Step] = (),
        *,
        satisfied: Iterable[str] = (),
        fail: Iterable[str] = (),
        broken_verify: Iterable[str] = (),
    ):
        super().__init__(Sudo(), env={"PATH": "/usr/bin"})
        self.satisfied = set(satisfied)
        self.fail = set(fail)
        self.broken_verify = set(broken_verify)
        self.ran: list[str] = []
        self.probed: list[str] = []
        self.stdin_seen: list[str] = []
        self._owner: dict[Command, Step] = {}
        for step in steps:
            for command in step.run:
                self._owner[command] = step

    def run(self, command: Command) -> None:
        line = self.command_line(command)
        self.ran.append(line)
        if command.stdin is not None:
            self.stdin_seen.append(command.stdin)
        if any(f in line for f in self.fail):
            raise CommandFailed(line, 1)
        step = self._owner.get(command)
        if step is not None and command == step.run[-1]:
            for probe in (step.check, step.verify):
                if probe is not None:
                    self.satisfied.add(self.command_line(probe))

    def succeeds(self, command: Command) -> bool:
        line = self.command_line(command)
        self.probed.append(line)
        if line in self.broken_verify:
            return False
        return line in self.satisfied

    def capture(self, command: Command) -> Optional[str]:
        return f"{command.cmd.split()[0]} 1.0.0"


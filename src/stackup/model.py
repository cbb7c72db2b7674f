# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


SKIPPED = "skipped"
APPLIED = "applied"
FAILED = "failed"


@dataclass(frozen=True)
class Command:
    """A single shell command run on the host."""
    cmd: str
    privileged: bool = False
    # May carry secrets (SQL with the database password): kept out of repr and argv.
    stdin: str | None = field(default=None, repr=False)
    cwd: str | None = None


@dataclass(frozen=True)
class Step:
    """
    A named unit of provisioning work.

    `check` decides whether the desired state already holds (step is skipped),
    `run` converges the host, `verify` confirms the result afterwards.
    """
    name: str
    run: tuple[Command, ...]
    check: Optional[Command] = None
    verify: Optional[Command] = None


@dataclass(frozen=True)
class StepResult:
    name: str
    status: str  # "skipped" | "applied" | "failed"
    error: str | None = None


@dataclass
class RunReport:
    """Ordered results of one run, in the order steps were declared."""
    results: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.status != FAILED for r in self.results)

    def statuses(self) -> dict[str, str]:
        return {r.name: r.status for r in self.results}

    def failed(self) -> StepResult | None:
        for r in self.results:
            if r.status == FAILED:
                return r
        return None

# catalog/services.py
from __future__ import annotations

import shlex

from ..dsl import service_running, sh, step
from ..model import Step


def enable_service(unit: str, *, label: str, restart: bool = False) -> Step:
    u = shlex.quote(unit)
    return step(
        f"{label}: enable service",
        sh(f"systemctl enable {u}", sudo=True),
        sh(f"systemctl {'restart' if restart else 'start'} {u}", sudo=True),
        check=service_running(unit),
        verify_with_check=True,
    )


def apache() -> Step:
    return enable_service("apache2", label="apache", restart=True)


def mysql() -> Step:
    return enable_service("mysql", label="mysql")

"""Step catalog: what a provisioned host looks like, in the order it gets there."""
from __future__ import annotations

from typing import List

from ..config import Configuration
from ..dsl import plan
from ..model import Step
from . import certbot
from . import database
from . import firewall
from . import oci
from . import python_tools
from . import services
from . import system


def default_plan(config: Configuration) -> List[Step]:
    return plan(
        system.update_packages(),
        system.install_packages(),
        system.pipx_ensurepath(),
        *firewall.firewall_steps(),
        services.apache(),
        services.mysql(),
        database.database_and_user(config),
        *python_tools.poetry_steps(config),
        *oci.oci_steps(),
        *certbot.certbot_steps(config),
    )


__all__ = ["default_plan"]

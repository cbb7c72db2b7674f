# catalog/certbot.py
from __future__ import annotations

import shlex
from typing import List

from ..config import Configuration
from ..dsl import packages_installed, sh, step
from ..model import Command, Step
from .system import apt_install


PACKAGES = ("certbot", "python3-certbot-apache")


def domains(config: Configuration) -> List[str]:
    return [config.domain, f"www.{config.domain}"]


def install_packages() -> Step:
    return step(
        "certbot: install packages",
        apt_install(*PACKAGES),
        check=packages_installed(*PACKAGES),
        verify_with_check=True,
    )


def request_command(config: Configuration) -> Command:
    args = ["certbot", "--apache", "--non-interactive", "--agree-tos"]
    if config.certbot_email:
        args += ["-m", config.certbot_email]
    else:
        args += ["--register-unsafely-without-email"]
    for d in domains(config):
        args += ["-d", d]
    return sh(shlex.join(args), sudo=True)


def certificate(config: Configuration) -> Step:
    """Issue a Let's Encrypt certificate for the domain and its www. alias."""
    live = f"/etc/letsencrypt/live/{config.domain}/fullchain.pem"
    return step(
        "certbot: certificate",
        request_command(config),
        # live/ is readable by root only
        check=sh(f"test -f {shlex.quote(live)}", sudo=True),
        verify_with_check=True,
    )


def renewal_timer() -> Step:
    return step(
        "certbot: renewal timer",
        sh("systemctl enable --now certbot.timer", sudo=True),
        check=sh("systemctl is-active --quiet certbot.timer"),
        verify_with_check=True,
    )


def certbot_steps(config: Configuration) -> List[Step]:
    return [install_packages(), certificate(config), renewal_timer()]

# catalog/system.py
from __future__ import annotations

import shlex

from ..dsl import file_contains, packages_installed, sh, step
from ..model import Step


BASE_PACKAGES = (
    "git",
    "curl",
    "apache2",
    "mysql-server",
    "python3",
    "python3-pip",
    "python3-venv",
    "pipx",
    "netfilter-persistent",
    "iptables-persistent",
)


def apt_install(*packages: str):
    # iptables-persistent asks about saving rules unless the frontend is noninteractive
    return sh(f"DEBIAN_FRONTEND=noninteractive apt-get install -y -q {shlex.join(packages)}", sudo=True)


# Lists older than this (or none at all, as on a fresh image) force a refresh.
LISTS_MAX_AGE = "-1 day"

FRESH_LISTS_PROBE = (
    f"find /var/lib/apt/lists -maxdepth 1 -name '*_Packages' -newermt {shlex.quote(LISTS_MAX_AGE)}"
    " | grep -q ."
)
UP_TO_DATE_PROBE = "apt-get -s -q upgrade | grep '^0 upgraded, 0 newly installed' >/dev/null"


def update_packages() -> Step:
    """Refresh package lists and upgrade whatever is outdated.

    The upgrade simulation is only trusted against recently refreshed lists.
    """
    return step(
        "system: update packages",
        sh("apt update -q", sudo=True),
        sh("DEBIAN_FRONTEND=noninteractive apt upgrade -y -q", sudo=True),
        # Neither probe needs privileges or changes anything.
        check=sh(f"{FRESH_LISTS_PROBE} && {UP_TO_DATE_PROBE}"),
    )


def install_packages() -> Step:
    return step(
        "system: install packages",
        apt_install(*BASE_PACKAGES),
        check=packages_installed(*BASE_PACKAGES),
        verify_with_check=True,
    )


def pipx_ensurepath() -> Step:
    """Make pipx-managed binaries (~/.local/bin) visible to login shells."""
    return step(
        "pipx: ensure PATH",
        sh("pipx ensurepath --force"),
        check=file_contains("~/.bashrc", ".local/bin"),
        verify_with_check=True,
    )

# catalog/oci.py
from __future__ import annotations

from typing import List

from ..dsl import command_exists, file_contains, sh, step
from ..model import Step


INSTALLER_URL = "https://raw.githubusercontent.com/oracle/oci-cli/master/scripts/install/install.sh"
INSTALLER_PATH = "/tmp/oci_install.sh"
PATH_LINE = "export PATH=$PATH:$HOME/oci/bin"


def install_cli() -> Step:
    return step(
        "oci: install cli",
        sh(f"curl -fsSL {INSTALLER_URL} -o {INSTALLER_PATH}"),
        sh(f"chmod +x {INSTALLER_PATH}"),
        sh(f'{INSTALLER_PATH} --accept-all-defaults --install-dir "$HOME/oci"'),
        check=command_exists("oci"),
        verify_with_check=True,
    )


def persist_path() -> Step:
    # Single quotes: $PATH and $HOME expand when ~/.bashrc is sourced, not now.
    return step(
        "oci: persist PATH",
        sh(f"echo '{PATH_LINE}' >> ~/.bashrc"),
        check=file_contains("~/.bashrc", PATH_LINE),
        verify_with_check=True,
    )


def oci_steps() -> List[Step]:
    return [install_cli(), persist_path()]

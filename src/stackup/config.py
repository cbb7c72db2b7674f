# config.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

import click
from dotenv import dotenv_values


DEFAULT_ENV_FILE = ".env"
DEFAULT_DB_NAME = "project_db"
DEFAULT_DB_USER = "project_user"

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_]{1,64}")
_HOSTNAME_RE = re.compile(
    r"(?=.{1,253}$)([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
)

Prompt = Callable[..., str]


class ConfigError(Exception):
    """Configuration value missing or malformed."""
    pass


@dataclass(frozen=True)
class Configuration:
    """
    Run-time parameters, resolved once before any step runs.

    db_pass is excluded from repr so the object is safe to log.
    """
    db_name: str
    db_user: str
    db_pass: str = field(repr=False)
    domain: str
    certbot_email: Optional[str] = None
    project_dir: Path = Path(".")
    home: Path = field(default_factory=Path.home)

    @property
    def extra_path(self) -> list[str]:
        """Directories the installers put binaries into."""
        return [
            str(self.home / ".local" / "bin"),
            str(self.home / "oci" / "bin"),
            str(self.home / "bin"),
        ]


def load_env_file(path: str | Path) -> Dict[str, str]:
    """
    Read KEY=VALUE pairs. A missing file is not an error.
    Values are returned, never exported into os.environ.
    """
    p = Path(path)
    if not p.is_file():
        return {}
    values = dotenv_values(p)
    return {k: v for k, v in values.items() if v is not None}


def resolve_config(
    environ: Mapping[str, str],
    file_values: Optional[Mapping[str, str]] = None,
    *,
    prompt: Prompt = click.prompt,
    project_dir: str | Path = ".",
    home: Optional[Path] = None,
) -> Configuration:
    """
    Precedence per key: environment > key-value file > prompt > default.

    DB_NAME and DB_USER have defaults and are never prompted.
    DB_PASS and DOMAIN have no default; the password prompt hides input.
    """
    file_values = file_values or {}

    def lookup(key: str) -> Optional[str]:
        value = environ.get(key)
        if value:
            return value
        value = file_values.get(key)
        if value:
            return value
        return None

    db_name = lookup("DB_NAME") or DEFAULT_DB_NAME
    db_user = lookup("DB_USER") or DEFAULT_DB_USER
    _check_identifier("DB_NAME", db_name)
    _check_identifier("DB_USER", db_user)

    db_pass = lookup("DB_PASS")
    if db_pass is None:
        db_pass = prompt(f"Enter MySQL password for user '{db_user}'", hide_input=True)
    if not db_pass:
        raise ConfigError("DB_PASS must not be empty")

    domain = lookup("DOMAIN")
    if domain is None:
        domain = prompt("Enter your domain (e.g. example.com)")
    domain = (domain or "").strip().lower()
    if not _HOSTNAME_RE.fullmatch(domain):
        raise ConfigError(f"DOMAIN is not a valid hostname: {domain!r}")
    if domain.startswith("www."):
        # www.<domain> is requested as well; a www. prefix would double it
        raise ConfigError(f"DOMAIN must be the bare domain, got {domain!r}")

    return Configuration(
        db_name=db_name,
        db_user=db_user,
        db_pass=db_pass,
        domain=domain,
        certbot_email=lookup("CERTBOT_EMAIL"),
        project_dir=Path(project_dir),
        home=home if home is not None else Path.home(),
    )


def _check_identifier(key: str, value: str) -> None:
    if not _IDENTIFIER_RE.fullmatch(value):
        raise ConfigError(
            f"{key} may only contain letters, digits and underscores (max 64), got {value!r}"
        )

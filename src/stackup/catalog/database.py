# catalog/database.py
from __future__ import annotations

from ..config import Configuration
from ..dsl import sh, step
from ..model import Step


def sql_string(value: str) -> str:
    """Quote a MySQL string literal.

    >>> sql_string("it's")
    "'it\\\\'s'"
    """
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _provision_sql(config: Configuration) -> str:
    db = f"`{config.db_name}`"
    user = f"{sql_string(config.db_user)}@'localhost'"
    return "\n".join([
        f"CREATE DATABASE IF NOT EXISTS {db};",
        f"CREATE USER IF NOT EXISTS {user} IDENTIFIED BY {sql_string(config.db_pass)};",
        f"GRANT ALL PRIVILEGES ON {db}.* TO {user};",
        "FLUSH PRIVILEGES;",
        "",
    ])


def _exists_sql(config: Configuration) -> str:
    name = sql_string(config.db_name)
    user = sql_string(config.db_user)
    # 3 = database + user + database-level grant
    return (
        "SELECT"
        f" (SELECT COUNT(*) FROM information_schema.SCHEMATA WHERE SCHEMA_NAME = {name})"
        f" + (SELECT COUNT(*) FROM mysql.user WHERE User = {user} AND Host = 'localhost')"
        f" + (SELECT COUNT(*) FROM mysql.db WHERE Db = {name} AND User = {user} AND Host = 'localhost');\n"
    )


def database_and_user(config: Configuration) -> Step:
    """
    Create the project database and a local user owning it.

    SQL goes to mysql on stdin: the password never shows up in argv,
    where other users could read it from the process list.
    """
    exists = sh("mysql --batch --skip-column-names | grep -x 3 >/dev/null", sudo=True, stdin=_exists_sql(config))
    return step(
        "mysql: database and user",
        sh("mysql", sudo=True, stdin=_provision_sql(config)),
        check=exists,
        verify_with_check=True,
    )

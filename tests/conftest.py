from pathlib import Path

import pytest

from stackup.config import Configuration
from stackup.ui.console import Console, set_console


@pytest.fixture
def config(tmp_path: Path) -> Configuration:
    return Configuration(
        db_name="project_db",
        db_user="project_user",
        db_pass="secret123",
        domain="example.com",
        project_dir=tmp_path,
        home=tmp_path / "home",
    )


@pytest.fixture
def console() -> Console:
    c = Console(debug=False)
    set_console(c)
    return c

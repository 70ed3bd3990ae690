"""Pytest fixtures for ergogen-router tests."""

from pathlib import Path

import pytest

from ergogen_router.geometry import Anchor
from ergogen_router.nets import NetTable

# Placement file with one footprint of each anchor form
PLACEMENT_YAML = """\
nets: [GND, ROW0, COL0]

footprints:
  row_route:
    at: {x: 100, y: 50, r: 0}
    params:
      net: ROW0
      route: "f(-8.275,5.1)(-8.275,7.26)"

  col_route:
    at: "(at 10 20 90)"
    params:
      net: COL0
      locked: true
      routes:
        - "b(0,0)(1,0)v"
        - "f(0,2)<GND>(0,3)"

  bare_via:
    at: [1, 2]
    params:
      route: "f(0,0)v"
"""


@pytest.fixture
def origin() -> Anchor:
    """Anchor at the board origin without rotation."""
    return Anchor()


@pytest.fixture
def nets() -> NetTable:
    """Net table with a few keyboard nets registered."""
    return NetTable(["GND", "ROW0", "COL0"])


@pytest.fixture
def placement_file(tmp_path: Path) -> Path:
    """A YAML placement file with three router footprints."""
    path = tmp_path / "keyboard.yaml"
    path.write_text(PLACEMENT_YAML)
    return path


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch) -> Path:
    """Run with no user config and a project root at tmp_path."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".git").mkdir(exist_ok=True)
    monkeypatch.setattr(
        "ergogen_router.config.USER_CONFIG_PATH", tmp_path / "user" / "config.toml"
    )
    return tmp_path

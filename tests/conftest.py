import os

import pytest

from models.player import LineupEntry
from scoring.config import ENV_RULES_PATH
from scoring.state import BaserunnerState


def pytest_sessionstart(session):
    """Keep a developer's local rules file from leaking into the suite."""
    os.environ.pop(ENV_RULES_PATH, None)


@pytest.fixture
def lineup():
    return [LineupEntry(f"p{i}", f"Player {i}") for i in range(1, 10)]


@pytest.fixture
def home_lineup():
    return [LineupEntry(f"h{i}", f"Home {i}") for i in range(1, 10)]


@pytest.fixture
def loaded_bases():
    return BaserunnerState("r1", "r2", "r3")


@pytest.fixture
def write_csv():
    def _write(path, header, rows):
        lines = [",".join(header)] + [",".join(str(v) for v in row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write

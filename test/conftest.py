import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def container(tmp_path: Path, clock):
    from bizledger.application.container import build_container
    from bizledger.config import Settings

    return build_container(tmp_path / "ledger.db", settings=Settings(notification_ttl=3.0), clock=clock)


def reload(db_path: Path):
    from bizledger.application.container import build_container
    from bizledger.config import Settings

    return build_container(db_path, settings=Settings())

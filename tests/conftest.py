from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from areagroup.config import Settings
from areagroup.database import build_session_factory
from areagroup.pipeline import PipelineRunner


HEADER = "First Name,Last Name,Gender,Phone Number,ID,EyeColor"


def write_csv(path: Path, rows: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as outfile:
        outfile.write(HEADER + "\n")
        for row in rows:
            outfile.write(row + "\n")
    return path


@pytest.fixture()
def make_csv() -> Callable[[Path, list[str]], Path]:
    return write_csv


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "data").mkdir(parents=True, exist_ok=True)
    (tmp_path / "outputs").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def users_csv(temp_workspace: Path) -> Path:
    return write_csv(
        temp_workspace / "data" / "users.csv",
        [
            "Joe,Shmoe,male,(555) 123-4567,1,brown",
            "Jane,Doe,female,+1 212.555.0100,2,blue",
            "Joey,Shmoe,male,,3,green",
        ],
    )


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        app_name="areagroup",
        database_url=f"sqlite:///{temp_workspace / 'test.db'}",
        log_level="INFO",
    )


@pytest.fixture()
def runner(test_settings: Settings) -> Generator[PipelineRunner, None, None]:
    session_factory = build_session_factory(test_settings.database_url)
    yield PipelineRunner(test_settings, session_factory)

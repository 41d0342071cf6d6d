import json
import os
from pathlib import Path
import subprocess
import sys


HEADER = "First Name,Last Name,Gender,Phone Number,ID,EyeColor"
REPO_ROOT = Path(__file__).resolve().parents[1]


def _base_env(tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["DATABASE_URL"] = f"sqlite:///{tmp_path / 'cli.db'}"
    env["LOG_LEVEL"] = "WARNING"
    return env


def _run_cli(tmp_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "areagroup.main", *args],
        cwd=REPO_ROOT,
        env=_base_env(tmp_path),
        check=False,
        capture_output=True,
        text=True,
    )


def _write_input(tmp_path: Path) -> Path:
    input_file = tmp_path / "input.csv"
    with input_file.open("w", encoding="utf-8", newline="") as outfile:
        outfile.write(HEADER + "\n")
        outfile.write("Joe,Shmoe,male,(555) 123-4567,1,brown\n")
        outfile.write("Joe,Bloggs,male,(555) 123-4567,2,brown\n")
    return input_file


def test_cli_converts_with_search_criteria(tmp_path: Path) -> None:
    input_file = _write_input(tmp_path)
    output_file = tmp_path / "out.json"

    proc = _run_cli(
        tmp_path,
        "convert",
        f"inputFile={input_file}",
        "outputType=json",
        f"outputFile={output_file}",
        "LastName=Shmoe",
        "FirstName=Joe",
    )

    assert proc.returncode == 0
    assert "status=succeeded" in proc.stdout
    assert json.loads(output_file.read_text(encoding="utf-8")) == {
        "AreaCode_555": {
            "User_1": {
                "FirstName": "Joe",
                "LastName": "Shmoe",
                "Gender": "male",
                "PhoneNumber": "(555) 123-4567",
                "ID": "1",
                "EyeColor": "brown",
            }
        }
    }


def test_cli_rejects_missing_input_file(tmp_path: Path) -> None:
    proc = _run_cli(tmp_path, "convert", "outputType=json")

    assert proc.returncode == 2
    assert "No input file name specified" in proc.stderr
    assert not (tmp_path / "cli.db").exists()


def test_cli_rejects_unknown_output_type(tmp_path: Path) -> None:
    input_file = _write_input(tmp_path)
    output_file = tmp_path / "out.blah"

    proc = _run_cli(tmp_path, "convert", f"inputFile={input_file}", "outputType=blah", f"outputFile={output_file}")

    assert proc.returncode == 2
    assert "Invalid output file type: blah" in proc.stderr
    assert not output_file.exists()


def test_cli_rejects_unknown_search_field(tmp_path: Path) -> None:
    proc = _run_cli(tmp_path, "convert", "inputFile=input.csv", "Age=30")

    assert proc.returncode == 2
    assert "Invalid field filter: Age" in proc.stderr


def test_cli_returns_nonzero_when_input_is_missing(tmp_path: Path) -> None:
    proc = _run_cli(tmp_path, "convert", f"inputFile={tmp_path / 'nope.csv'}", f"outputFile={tmp_path / 'out.json'}")

    assert proc.returncode == 1
    assert "status=failed" in proc.stdout


def test_cli_history_lists_runs(tmp_path: Path) -> None:
    input_file = _write_input(tmp_path)
    _run_cli(tmp_path, "convert", f"inputFile={input_file}", "outputType=xml", f"outputFile={tmp_path / 'out.xml'}")

    proc = _run_cli(tmp_path, "history", "--limit", "5")

    assert proc.returncode == 0
    assert "status=succeeded" in proc.stdout
    assert "type=xml" in proc.stdout

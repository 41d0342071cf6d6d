from collections.abc import Iterator
import csv
from pathlib import Path

from areagroup.schemas import RawRecord


def read_rows(input_path: Path) -> Iterator[RawRecord]:
    if not input_path.exists():
        raise FileNotFoundError(f"input file not found: {input_path}")

    with input_path.open("r", newline="", encoding="utf-8") as infile:
        reader = csv.DictReader(infile)
        for row in reader:
            # Cells past the header land under the None key.
            row.pop(None, None)
            yield row

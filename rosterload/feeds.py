import csv
import json
from collections.abc import Sequence
from pathlib import Path
from types import MappingProxyType

from rosterload.schemas import Record


def read_csv_records(input_path: Path) -> list[Record]:
    if not input_path.exists():
        raise FileNotFoundError(f"input file not found: {input_path}")

    records: list[Record] = []
    # utf-8-sig tolerates the BOM spreadsheet exports prepend.
    with input_path.open("r", encoding="utf-8-sig", newline="") as infile:
        reader = csv.DictReader(infile)
        for row in reader:
            # Delimiter-only rows are kept so the validator reports them.
            values = {key: (value or "") for key, value in row.items() if key is not None}
            records.append(MappingProxyType(values))
    return records


def record_columns(records: Sequence[Record]) -> list[str]:
    columns: list[str] = []
    seen: set[str] = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def write_csv(path: Path, records: Sequence[Record]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as outfile:
        writer = csv.DictWriter(outfile, fieldnames=record_columns(records), restval="")
        writer.writeheader()
        for record in records:
            writer.writerow(dict(record))


def write_json(path: Path, payload: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as outfile:
        json.dump(payload, outfile, indent=2)
        outfile.write("\n")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as outfile:
        outfile.write(text)

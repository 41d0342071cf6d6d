from dataclasses import dataclass, field
from enum import StrEnum


RawRecord = dict[str, str | None]
NormalizedRecord = dict[str, str]
OutputTree = dict[str, dict[str, NormalizedRecord]]


class ConverterState(StrEnum):
    IDLE = "idle"
    READING = "reading"
    NORMALIZING = "normalizing"
    MATCHING = "matching"
    GROUPING = "grouping"
    SERIALIZING = "serializing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionWarning:
    kind: str
    message: str
    row_index: int | None = None


@dataclass
class ConversionResult:
    input_file: str
    output_file: str
    output_type: str
    output: str
    tree: OutputTree
    total_rows: int
    matched_records: int
    output_records: int
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass(frozen=True)
class PipelineResult:
    run_id: int
    input_file: str
    output_file: str
    output_type: str
    status: str
    total_rows: int
    matched_records: int
    output_records: int
    warning_count: int
    error: str | None

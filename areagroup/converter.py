from collections.abc import Callable, Iterable, Mapping, Sequence
import logging
from pathlib import Path

from areagroup.errors import ConfigurationError
from areagroup.grouper import add_record, count_records
from areagroup.matcher import SearchCriteria, matches
from areagroup.normalizer import normalize_record
from areagroup.reader import read_rows
from areagroup.schemas import ConversionResult, ConversionWarning, ConverterState, OutputTree, RawRecord
from areagroup.serializers import DEFAULT_OUTPUT_FILES, SERIALIZERS, write_output


logger = logging.getLogger(__name__)

WarningSink = Callable[[ConversionWarning], None]


def log_warning(warning: ConversionWarning) -> None:
    logger.warning(warning.message, extra={"kind": warning.kind, "row_index": warning.row_index})


class FileConverter:
    """Reads a CSV of user records and writes them grouped by phone area code.

    Configuration is checked here, before the input file is touched. Field
    problems and duplicate IDs only produce warnings; read and write failures
    propagate from ``convert``.
    """

    def __init__(
        self,
        input_file: str | Path | None,
        output_type: str = "json",
        output_file: str | Path | None = None,
        search_criteria: Mapping[str, str | Sequence[str]] | None = None,
        warning_sink: WarningSink | None = None,
    ) -> None:
        if not input_file:
            raise ConfigurationError("No input file name specified")
        if output_type not in SERIALIZERS:
            raise ConfigurationError(f"Invalid output file type: {output_type}")

        self.search_criteria = SearchCriteria.from_mapping(search_criteria)
        self.input_file = Path(input_file)
        self.output_type = output_type
        self.output_file = Path(output_file or DEFAULT_OUTPUT_FILES[output_type])
        self.warning_sink = warning_sink or log_warning
        self.state = ConverterState.IDLE
        # Kept across a failed run so callers can still report them.
        self.warnings: list[ConversionWarning] = []

    def convert(self) -> ConversionResult:
        try:
            result = self.process_rows(read_rows(self.input_file))
            self.state = ConverterState.SERIALIZING
            result.output = SERIALIZERS[self.output_type](result.tree)
            write_output(self.output_file, result.output)
        except Exception:
            self.state = ConverterState.FAILED
            raise

        self.state = ConverterState.DONE
        logger.info(
            "Successfully converted %s to %s as %s",
            self.input_file,
            self.output_file,
            self.output_type,
            extra={"output_records": result.output_records, "warning_count": len(result.warnings)},
        )
        return result

    def process_rows(self, rows: Iterable[RawRecord]) -> ConversionResult:
        tree: OutputTree = {}
        self.warnings = []
        total_rows = 0
        matched_records = 0

        self.state = ConverterState.READING
        for row_index, raw in enumerate(rows):
            total_rows += 1

            self.state = ConverterState.NORMALIZING
            record, field_warnings = normalize_record(raw, row_index=row_index)
            for warning in field_warnings:
                self._emit(warning)

            self.state = ConverterState.MATCHING
            if matches(record, self.search_criteria):
                matched_records += 1
                self.state = ConverterState.GROUPING
                duplicate = add_record(tree, record, row_index=row_index)
                if duplicate is not None:
                    self._emit(duplicate)

            self.state = ConverterState.READING

        return ConversionResult(
            input_file=str(self.input_file),
            output_file=str(self.output_file),
            output_type=self.output_type,
            output="",
            tree=tree,
            total_rows=total_rows,
            matched_records=matched_records,
            output_records=count_records(tree),
            warnings=self.warnings,
        )

    def _emit(self, warning: ConversionWarning) -> None:
        self.warnings.append(warning)
        self.warning_sink(warning)

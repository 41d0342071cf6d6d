import logging

from sqlalchemy.orm import Session, sessionmaker

from areagroup.config import Settings
from areagroup.converter import FileConverter
from areagroup.db_models import ConversionRun
from areagroup.run_store import create_run, mark_run_failed, mark_run_running, mark_run_succeeded, store_warnings
from areagroup.schemas import PipelineResult


logger = logging.getLogger(__name__)


class PipelineRunner:
    def __init__(self, settings: Settings, session_factory: sessionmaker[Session]) -> None:
        self.settings = settings
        self.session_factory = session_factory

    def run(self, converter: FileConverter) -> PipelineResult:
        with self.session_factory() as db:
            run = create_run(
                db,
                input_file=str(converter.input_file),
                output_file=str(converter.output_file),
                output_type=converter.output_type,
                search_criteria=converter.search_criteria.to_dict(),
            )
            mark_run_running(db, run)

            try:
                result = converter.convert()
            except Exception as exc:
                store_warnings(db, run_id=run.id, warnings=converter.warnings)
                mark_run_failed(db, run, error=str(exc), warning_count=len(converter.warnings))
                logger.exception(
                    "conversion run failed",
                    extra={"app": self.settings.app_name, "run_id": run.id, "state": str(converter.state)},
                )
                return self._result_from_run(run)

            store_warnings(db, run_id=run.id, warnings=result.warnings)
            mark_run_succeeded(db, run, result)
            return self._result_from_run(run)

    def _result_from_run(self, run: ConversionRun) -> PipelineResult:
        return PipelineResult(
            run_id=run.id,
            input_file=run.input_file,
            output_file=run.output_file,
            output_type=run.output_type,
            status=run.status,
            total_rows=run.total_rows,
            matched_records=run.matched_records,
            output_records=run.output_records,
            warning_count=run.warning_count,
            error=run.error,
        )

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from areagroup.db_models import ConversionRun, RunWarning, utc_now
from areagroup.schemas import ConversionResult, ConversionWarning


def create_run(
    db: Session,
    *,
    input_file: str,
    output_file: str,
    output_type: str,
    search_criteria: dict[str, list[str]],
) -> ConversionRun:
    run = ConversionRun(
        input_file=input_file,
        output_file=output_file,
        output_type=output_type,
        search_criteria=json.dumps(search_criteria, sort_keys=True),
        status="queued",
    )
    db.add(run)
    db.commit()
    db.refresh(run)
    return run


def mark_run_running(db: Session, run: ConversionRun) -> None:
    run.status = "running"
    run.started_at = utc_now()
    run.error = None
    db.commit()


def mark_run_succeeded(db: Session, run: ConversionRun, result: ConversionResult) -> None:
    run.status = "succeeded"
    run.total_rows = result.total_rows
    run.matched_records = result.matched_records
    run.output_records = result.output_records
    run.warning_count = len(result.warnings)
    run.completed_at = utc_now()
    run.error = None
    db.commit()


def mark_run_failed(db: Session, run: ConversionRun, *, error: str, warning_count: int = 0) -> None:
    run.status = "failed"
    run.error = error
    run.warning_count = warning_count
    run.completed_at = utc_now()
    db.commit()


def store_warnings(db: Session, *, run_id: int, warnings: list[ConversionWarning]) -> None:
    for warning in warnings:
        db.add(
            RunWarning(
                run_id=run_id,
                row_index=warning.row_index,
                kind=warning.kind,
                message=warning.message,
            )
        )
    db.commit()


def list_runs(db: Session, *, limit: int = 10) -> list[ConversionRun]:
    stmt = select(ConversionRun).order_by(ConversionRun.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())

import argparse
import logging

from areagroup.config import get_settings
from areagroup.converter import FileConverter
from areagroup.database import build_session_factory
from areagroup.errors import ConfigurationError
from areagroup.pipeline import PipelineRunner
from areagroup.run_store import list_runs


logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a CSV of users to JSON or XML grouped by area code")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser("convert", help="run one conversion")
    convert_parser.add_argument(
        "params",
        nargs="+",
        metavar="key=value",
        help="inputFile=..., outputType=json|xml, outputFile=..., or a search field such as LastName=Smith",
    )

    history_parser = subparsers.add_parser("history", help="list recent conversion runs")
    history_parser.add_argument("--limit", type=int, default=10, help="number of runs to show")

    return parser.parse_args(argv)


def parse_params(params: list[str]) -> dict[str, object]:
    input_file: str | None = None
    output_type = "json"
    output_file: str | None = None
    search_criteria: dict[str, list[str]] = {}

    for param in params:
        key, sep, value = param.partition("=")
        if not sep:
            raise ConfigurationError(f"Unknown input parameter: {param}")

        if key == "inputFile":
            input_file = value
        elif key == "outputType":
            output_type = value
        elif key == "outputFile":
            output_file = value
        else:
            search_criteria.setdefault(key, []).append(value)

    return {
        "input_file": input_file,
        "output_type": output_type,
        "output_file": output_file,
        "search_criteria": search_criteria,
    }


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.command == "history":
        session_factory = build_session_factory(settings.database_url)
        with session_factory() as db:
            for run in list_runs(db, limit=args.limit):
                print(
                    "run_id={run_id} status={status} input={input} output={output} type={type} rows={rows} records={records} warnings={warnings}".format(
                        run_id=run.id,
                        status=run.status,
                        input=run.input_file,
                        output=run.output_file,
                        type=run.output_type,
                        rows=run.total_rows,
                        records=run.output_records,
                        warnings=run.warning_count,
                    )
                )
        return

    try:
        converter = FileConverter(**parse_params(args.params))
    except ConfigurationError as exc:
        logger.error("invalid configuration: %s", exc)
        raise SystemExit(2) from exc

    runner = PipelineRunner(settings, build_session_factory(settings.database_url))
    result = runner.run(converter)

    print(
        "run_id={run_id} status={status} input={input} output={output} type={type} rows={rows} matched={matched} records={records} warnings={warnings}".format(
            run_id=result.run_id,
            status=result.status,
            input=result.input_file,
            output=result.output_file,
            type=result.output_type,
            rows=result.total_rows,
            matched=result.matched_records,
            records=result.output_records,
            warnings=result.warning_count,
        )
    )
    if result.status == "failed":
        raise SystemExit(1)


if __name__ == "__main__":
    main()

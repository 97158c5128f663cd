"""Command-line entry point: ``python -m bird_mixed_models``.

Sub-commands
    prepare   load the morphology CSV, add derived columns, save the intermediate file
    fit       run the full analysis (prepare, fit, diagnostics, shrinkage)
    schedule  load the course schedule and print it
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import config, pipelines

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bird_mixed_models",
        description="Mixed-effects models of beak height against wing length across taxa.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    prep = sub.add_parser("prepare", help="Add derived columns and save the prepared table")
    prep.add_argument("--input", type=Path, default=config.RAW_DATA_DIR / config.MORPHOLOGY_FILE,
                      help="Morphology CSV")
    prep.add_argument("--output", type=Path, default=config.PROCESSED_DATA_DIR / config.PREPARED_FILE,
                      help="Where to write the prepared CSV")

    fit = sub.add_parser("fit", help="Run the full model-fitting and diagnostics workflow")
    fit.add_argument("--input", type=Path, default=config.RAW_DATA_DIR / config.MORPHOLOGY_FILE,
                     help="Morphology CSV")
    fit.add_argument("--output-dir", type=Path, default=config.RESULTS_DIR,
                     help="Directory for summaries, tables and figures")
    fit.add_argument("--prepared", type=Path, default=config.PROCESSED_DATA_DIR / config.PREPARED_FILE,
                     help="Where to write the prepared CSV")
    fit.add_argument("--schedule", type=Path, default=None,
                     help="Course schedule spreadsheet to read before fitting")

    sched = sub.add_parser("schedule", help="Load and print the course schedule")
    sched.add_argument("--input", type=Path, default=config.RAW_DATA_DIR / config.SCHEDULE_FILE,
                       help="Schedule spreadsheet (.xlsx or .csv)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(message)s")

    try:
        if args.command == "prepare":
            prepared = pipelines.run_data_preparation(args.input, args.output)
            logger.info("Prepared %d rows -> %s", len(prepared), args.output)
        elif args.command == "fit":
            models = pipelines.run_analysis(args.input, args.output_dir, args.prepared, args.schedule)
            for name, model in models.items():
                logger.info("%s: logLik=%.3f AIC=%.3f converged=%s",
                            name, model.log_likelihood, model.aic, model.converged)
        elif args.command == "schedule":
            table = pipelines.run_schedule(args.input)
            print(table.to_string(index=False))
    except Exception:
        logger.exception("Command '%s' failed", args.command)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

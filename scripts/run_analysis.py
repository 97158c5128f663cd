r"""Thin wrapper for running the mixed-model workflow on a morphology export.

Usage examples:
# run the full analysis on the default input (data/raw/bird_morphology.csv)
#   python scripts/run_analysis.py

# point at another export and results directory
#   python scripts/run_analysis.py --input data\raw\avonet_subset.csv --output-dir results\avonet

# only prepare the intermediate table
#   python scripts/run_analysis.py --prepare-only
"""
from __future__ import annotations

import sys
import argparse
import logging
import subprocess
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def find_most_recent_csv(base: Path) -> Path | None:
    if not base.exists():
        return None
    files = [p for p in base.glob("*.csv") if p.is_file()]
    if not files:
        return None
    return max(files, key=lambda p: p.stat().st_mtime)


def build_cmd(input_path: Path, output_dir: Path | None, prepare_only: bool, log_level: str) -> list:
    cmd = [
        sys.executable,
        "-m",
        "bird_mixed_models",
        "--log-level",
        log_level,
    ]
    if prepare_only:
        cmd += ["prepare", "--input", str(input_path)]
        return cmd
    cmd += ["fit", "--input", str(input_path)]
    if output_dir:
        cmd += ["--output-dir", str(output_dir)]
    return cmd


def main(argv: list[str] | None = None) -> int:
    repo_root = Path(__file__).resolve().parents[1]
    default_raw_base = repo_root / "data" / "raw"
    parser = argparse.ArgumentParser(description="Fit mixed models to bird morphology data (thin wrapper).")
    parser.add_argument("--input", type=Path, help="Morphology CSV; defaults to the newest CSV in data/raw")
    parser.add_argument("--output-dir", type=Path, help="Directory for summaries, tables and figures")
    parser.add_argument("--prepare-only", action="store_true", help="Only write the prepared table")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    input_path = args.input
    if not input_path:
        input_path = find_most_recent_csv(default_raw_base)
        if not input_path:
            logger.error("No CSV files found in %s", default_raw_base)
            return 2
        logger.info("Auto-detected most recent input: %s", input_path)
    input_path = input_path.resolve()

    cmd = build_cmd(input_path, args.output_dir, args.prepare_only, args.log_level)
    logger.info("Running analysis: %s", " ".join(map(str, cmd)))

    try:
        res = subprocess.run(cmd, check=False)
        return res.returncode
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())

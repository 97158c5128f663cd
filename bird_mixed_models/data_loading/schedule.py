"""Load the course schedule spreadsheet."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..utils import file_io


def load_schedule(path: Path | str) -> pd.DataFrame:
    """Read the schedule table and return it as a tidy DataFrame.

    Header whitespace is stripped, fully blank rows are dropped, and a
    `date` column (matched case-insensitively) is parsed to datetimes.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schedule file not found: {path}")

    logging.info("Loading course schedule from %s", path)
    df = file_io.read_table(path)
    df.columns = [str(col).strip() for col in df.columns]
    df = df.dropna(how="all").reset_index(drop=True)

    date_cols = [col for col in df.columns if col.lower() == "date"]
    for col in date_cols:
        df[col] = pd.to_datetime(df[col])

    logging.info("Schedule has %d sessions", len(df))
    return df

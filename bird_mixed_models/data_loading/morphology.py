"""
Load the bird morphology observation table.

The raw export carries one row per specimen with the taxon label and two
morphological measurements.  This module renames the source columns to
the canonical names in `config`, checks that the measurements are usable
for log-scale modelling, and returns a tidy DataFrame.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import pandas as pd

from .. import config
from ..utils import file_io

REQUIRED_COLUMNS = (config.TAXON_COL, config.WING_COL, config.BEAK_COL)
MEASUREMENT_COLUMNS = (config.WING_COL, config.BEAK_COL)


def validate_observations(df: pd.DataFrame) -> pd.DataFrame:
    """Check the canonical columns and return the frame unchanged.

    Raises
    ------
    KeyError
        If one of the canonical columns is missing.
    ValueError
        If a canonical column contains nulls, or a measurement is not
        numeric or not strictly positive.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise KeyError(f"Observation table is missing column(s): {', '.join(missing)}")

    for col in REQUIRED_COLUMNS:
        n_null = int(df[col].isna().sum())
        if n_null:
            raise ValueError(f"Column '{col}' contains {n_null} missing value(s)")

    for col in MEASUREMENT_COLUMNS:
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise ValueError(f"Column '{col}' must be numeric, got {df[col].dtype}")
        n_bad = int((df[col] <= 0).sum())
        if n_bad:
            raise ValueError(
                f"Column '{col}' must be strictly positive; {n_bad} row(s) are not"
            )
    return df


def load_observations(
    path: Path | str,
    columns: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """Read the morphology CSV and return the canonical observation table.

    Parameters
    ----------
    path : Path or str
        CSV file with one row per measured specimen.
    columns : mapping, optional
        Source-to-canonical column names.  Defaults to
        `config.SOURCE_COLUMNS`; columns already carrying canonical
        names are left as they are.

    Returns
    -------
    pandas.DataFrame
        Columns `taxon`, `wing_length`, `beak_height` (in that order),
        with `taxon` as a string label.
    """
    path = Path(path)
    mapping = dict(config.SOURCE_COLUMNS if columns is None else columns)

    logging.info("Loading morphology observations from %s", path)
    raw = file_io.read_csv(path)
    renames = {src: dst for src, dst in mapping.items() if src in raw.columns and src != dst}
    clashes = [f"{src} -> {dst}" for src, dst in renames.items() if dst in raw.columns]
    targets = list(renames.values())
    clashes += [f"several sources -> {dst}" for dst in sorted(set(targets)) if targets.count(dst) > 1]
    if clashes:
        raise ValueError(
            "Source columns would overwrite existing columns: " + ", ".join(clashes)
        )
    df = raw.rename(columns=renames)
    validate_observations(df)

    df = df.loc[:, list(REQUIRED_COLUMNS)].copy()
    df[config.TAXON_COL] = df[config.TAXON_COL].astype(str)
    logging.info(
        "Loaded %d observations across %d taxa",
        len(df),
        df[config.TAXON_COL].nunique(),
    )
    return df

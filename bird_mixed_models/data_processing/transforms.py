"""
Derived columns for the observation table.

Each helper returns a new DataFrame with one extra column appended; the
input frame is never modified.  `prepare_observations` applies them in
the order the models need.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .. import config


def add_log_column(df: pd.DataFrame, column: str, new_column: str) -> pd.DataFrame:
    """Append the natural log of `column` as `new_column`."""
    out = df.copy()
    out[new_column] = np.log(out[column])
    return out


def add_centered_column(df: pd.DataFrame, column: str, new_column: str) -> pd.DataFrame:
    """Append `column` minus its grand mean as `new_column`."""
    out = df.copy()
    out[new_column] = out[column] - out[column].mean()
    return out


def add_group_mean(
    df: pd.DataFrame, column: str, group: str, new_column: str
) -> pd.DataFrame:
    """Append the per-group mean of `column`, broadcast back to each row."""
    out = df.copy()
    out[new_column] = out.groupby(group)[column].transform("mean")
    return out


def add_group_count(df: pd.DataFrame, group: str, new_column: str) -> pd.DataFrame:
    """Append the number of rows in each row's group."""
    out = df.copy()
    out[new_column] = out.groupby(group)[group].transform("size").astype(int)
    return out


def prepare_observations(df: pd.DataFrame) -> pd.DataFrame:
    """Append every derived column used by the models and plots.

    Adds `log_wing_length`, `log_beak_height`, the centred predictor
    `c_log_wing_length`, its per-taxon mean and the per-taxon count.
    """
    out = add_log_column(df, config.WING_COL, config.LOG_WING_COL)
    out = add_log_column(out, config.BEAK_COL, config.LOG_BEAK_COL)
    out = add_centered_column(out, config.LOG_WING_COL, config.CENTERED_WING_COL)
    out = add_group_mean(out, config.CENTERED_WING_COL, config.TAXON_COL, config.TAXON_MEAN_COL)
    out = add_group_count(out, config.TAXON_COL, config.TAXON_COUNT_COL)
    logging.info(
        "Prepared %d observations; taxon sizes range %d-%d",
        len(out),
        out[config.TAXON_COUNT_COL].min(),
        out[config.TAXON_COUNT_COL].max(),
    )
    return out


def taxon_counts(df: pd.DataFrame, group: str = config.TAXON_COL) -> pd.Series:
    """Number of observations per taxon, largest first."""
    return df[group].value_counts()

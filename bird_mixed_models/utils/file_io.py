"""File input/output helper functions."""

import json
import logging
from pathlib import Path

import pandas as pd


def read_json(path):
    """Read a JSON file and return the loaded object."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except Exception as exc:
        logging.error("Failed to read JSON file %s: %s", path, exc)
        raise


def write_json(data, path):
    """Write a Python object to a JSON file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
    except Exception as exc:
        logging.error("Failed to write JSON file %s: %s", path, exc)
        raise


def read_csv(path, **kwargs):
    """Read a CSV file into a DataFrame."""
    path = Path(path)
    try:
        return pd.read_csv(path, **kwargs)
    except Exception as exc:
        logging.error("Failed to read CSV file %s: %s", path, exc)
        raise


def write_csv(df, path, index=False):
    """Write a DataFrame to a CSV file, creating the parent directory."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=index)
    except Exception as exc:
        logging.error("Failed to write CSV file %s: %s", path, exc)
        raise


def read_table(path):
    """Read a spreadsheet-like table (CSV, TSV or Excel) into a DataFrame.

    The reader is picked from the file suffix.  Excel workbooks are read
    from their first sheet.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix in (".xlsx", ".xls"):
            return pd.read_excel(path, sheet_name=0)
        if suffix in (".tsv", ".tab"):
            return pd.read_csv(path, sep="\t")
        return pd.read_csv(path)
    except Exception as exc:
        logging.error("Failed to read table %s: %s", path, exc)
        raise


def write_text(text, path):
    """Write a string to a UTF-8 text file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(text)
    except Exception as exc:
        logging.error("Failed to write text file %s: %s", path, exc)
        raise

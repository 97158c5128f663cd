# tests/test_schedule.py
"""Tests for loading the course schedule."""

from pathlib import Path

import pandas as pd
import pytest

from bird_mixed_models.data_loading.schedule import load_schedule


class TestLoadSchedule:
    """Tests for load_schedule."""

    def test_csv_schedule(self, temp_dir: Path):
        path = temp_dir / "schedule.csv"
        path.write_text(
            " Date ,Topic\n2024-01-08,Linear models\n,\n2024-01-15,Mixed models\n",
            encoding="utf-8",
        )

        df = load_schedule(path)
        assert list(df.columns) == ["Date", "Topic"]
        assert len(df) == 2
        assert pd.api.types.is_datetime64_any_dtype(df["Date"])

    def test_xlsx_schedule(self, temp_dir: Path):
        pytest.importorskip("openpyxl")
        path = temp_dir / "schedule.xlsx"
        pd.DataFrame({"week": [1, 2], "topic": ["Intro", "Shrinkage"]}).to_excel(path, index=False)

        df = load_schedule(path)
        assert df["topic"].tolist() == ["Intro", "Shrinkage"]

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_schedule(temp_dir / "schedule.xlsx")

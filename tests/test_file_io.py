# tests/test_file_io.py
"""Tests for file input/output helpers."""

from pathlib import Path

import pandas as pd
import pytest

from bird_mixed_models.utils import file_io


class TestJson:
    """Tests for read_json / write_json."""

    def test_write_then_read(self, temp_dir: Path):
        path = temp_dir / "nested" / "overview.json"
        file_io.write_json({"converged": True, "aic": 12.5}, path)

        assert file_io.read_json(path) == {"converged": True, "aic": 12.5}

    def test_read_missing_file_raises(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            file_io.read_json(temp_dir / "missing.json")


class TestTables:
    """Tests for CSV and spreadsheet helpers."""

    def test_write_csv_creates_parent(self, temp_dir: Path):
        path = temp_dir / "out" / "table.csv"
        file_io.write_csv(pd.DataFrame({"a": [1, 2]}), path)

        assert path.exists()
        assert file_io.read_csv(path)["a"].tolist() == [1, 2]

    def test_read_csv_missing_logs_and_raises(self, temp_dir: Path, caplog):
        with pytest.raises(FileNotFoundError):
            file_io.read_csv(temp_dir / "missing.csv")
        assert "Failed to read CSV file" in caplog.text

    def test_read_table_tsv(self, temp_dir: Path):
        path = temp_dir / "schedule.tsv"
        path.write_text("week\ttopic\n1\tintro\n2\tmodels\n", encoding="utf-8")

        df = file_io.read_table(path)
        assert list(df.columns) == ["week", "topic"]
        assert len(df) == 2

    def test_write_text(self, temp_dir: Path):
        path = temp_dir / "summaries" / "model.txt"
        file_io.write_text("Mixed Linear Model Regression Results", path)

        assert path.read_text(encoding="utf-8").startswith("Mixed Linear")

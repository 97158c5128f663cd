# tests/conftest.py
"""Shared fixtures for the mixed-model workflow tests."""

import os
import tempfile
from pathlib import Path
from typing import Dict, Generator

import matplotlib

matplotlib.use("Agg")

# Keep the package's data directories out of the source tree during tests.
os.environ.setdefault("BIRD_MODELS_DATA_DIR", tempfile.mkdtemp(prefix="bird_models_data_"))
os.environ.setdefault("BIRD_MODELS_RESULTS_DIR", tempfile.mkdtemp(prefix="bird_models_results_"))

import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from bird_mixed_models.analysis.mixed_models import (  # noqa: E402
    FittedMixedModel,
    fit_mixed_model,
    tutorial_specs,
)
from bird_mixed_models.data_processing.transforms import prepare_observations  # noqa: E402

# Observations per taxon; the first two taxa are deliberately tiny.
TAXON_SIZES = [1, 2, 4, 6, 10, 15, 20, 25, 30, 35, 40, 50]
TRUE_INTERCEPT = 1.0
TRUE_SLOPE = 0.8


def make_morphology(seed: int = 20240101) -> pd.DataFrame:
    """Synthetic morphology data with taxon-varying intercepts and slopes."""
    rng = np.random.default_rng(seed)
    frames = []
    for i, n in enumerate(TAXON_SIZES):
        taxon = f"Taxon_{chr(ord('A') + i)}"
        taxon_mean = rng.normal(4.5, 0.5)
        u0 = rng.normal(0.0, 0.3)
        u1 = rng.normal(0.0, 0.3)
        log_wing = rng.normal(taxon_mean, 0.15, size=n)
        log_beak = (
            TRUE_INTERCEPT
            + u0
            + (TRUE_SLOPE + u1) * (log_wing - 4.5)
            + rng.normal(0.0, 0.1, size=n)
        )
        frames.append(
            pd.DataFrame(
                {
                    "taxon": taxon,
                    "wing_length": np.exp(log_wing),
                    "beak_height": np.exp(log_beak),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def observations() -> pd.DataFrame:
    """Canonical observation table."""
    return make_morphology()


@pytest.fixture
def raw_morphology_csv(temp_dir: Path, observations: pd.DataFrame) -> Path:
    """Morphology export using the source database's column names."""
    path = temp_dir / "bird_morphology.csv"
    observations.rename(
        columns={"taxon": "Family", "wing_length": "Wing.Length", "beak_height": "Beak.Depth"}
    ).assign(Species="sp.").to_csv(path, index=False)
    return path


@pytest.fixture(scope="session")
def prepared() -> pd.DataFrame:
    """Observation table with all derived columns."""
    return prepare_observations(make_morphology())


@pytest.fixture(scope="session")
def fitted_models(prepared: pd.DataFrame) -> Dict[str, FittedMixedModel]:
    """The three nested workflow models, fitted once per session."""
    return {spec.label: fit_mixed_model(prepared, spec) for spec in tutorial_specs()}


@pytest.fixture(scope="session")
def intercept_model(fitted_models) -> FittedMixedModel:
    return fitted_models["random_intercept"]


@pytest.fixture(scope="session")
def slope_model(fitted_models) -> FittedMixedModel:
    return fitted_models["random_slope"]

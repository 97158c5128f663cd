"""
High‑level pipeline orchestration functions.

Each function in this module coordinates a distinct stage of the
analysis.  The functions call into lower‑level modules defined in
`data_loading`, `data_processing` and `analysis`.  Use these functions
from the command line (`python -m bird_mixed_models`) or import them
into your own scripts/notebooks.

The stages run strictly in order; any failure propagates and stops the
run.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from . import config
from .analysis import diagnostics as diag
from .analysis import shrinkage, visualizations
from .analysis.mixed_models import FittedMixedModel, fit_mixed_model, tutorial_specs
from .data_loading import morphology, schedule
from .data_processing import transforms
from .utils import file_io


def run_data_preparation(
    input_path: Path | None = None,
    output_path: Path | None = None,
) -> pd.DataFrame:
    """Load the morphology table, append derived columns and save it.

    The prepared table is the single intermediate file of the workflow;
    it is written to `output_path` (default
    `config.PROCESSED_DATA_DIR / config.PREPARED_FILE`).
    """
    input_path = Path(input_path or config.RAW_DATA_DIR / config.MORPHOLOGY_FILE)
    output_path = Path(output_path or config.PROCESSED_DATA_DIR / config.PREPARED_FILE)

    observations = morphology.load_observations(input_path)
    prepared = transforms.prepare_observations(observations)

    logging.info("Writing prepared observations to %s", output_path)
    file_io.write_csv(prepared, output_path)
    return prepared


def run_model_fitting(
    data: pd.DataFrame,
    output_dir: Path | None = None,
) -> dict[str, FittedMixedModel]:
    """Fit the nested models and write their summaries and comparison table.

    Returns the fitted models keyed by name, simplest first:
    `random_intercept`, `random_slope`, `random_slope_taxon_mean`.
    """
    output_dir = Path(output_dir or config.RESULTS_DIR)
    models: dict[str, FittedMixedModel] = {}
    for spec in tutorial_specs():
        logging.info("Fitting model %s…", spec.label)
        fitted = fit_mixed_model(data, spec)
        models[spec.label] = fitted
        file_io.write_text(fitted.summary_text(), output_dir / f"summary_{spec.label}.txt")

    comparison = diag.compare_models(list(models.values()))
    file_io.write_csv(comparison, output_dir / "model_comparison.csv")
    file_io.write_json(
        {name: model.overview() for name, model in models.items()},
        output_dir / "model_overview.json",
    )
    return models


def run_diagnostics(
    data: pd.DataFrame,
    model: FittedMixedModel,
    output_dir: Path | None = None,
    label: str | None = None,
) -> pd.DataFrame:
    """Extract fitted values and residuals and draw the diagnostic plots."""
    output_dir = Path(output_dir or config.RESULTS_DIR)
    label = label or model.spec.label
    predictor = model.spec.predictors[0]

    logging.info("Extracting fitted values and residuals for %s…", label)
    diagnostics = diag.extract_diagnostics(model, data)
    file_io.write_csv(diagnostics, output_dir / f"diagnostics_{label}.csv")

    figures = output_dir / "figures"
    visualizations.plot_fitted_lines(
        data, diagnostics, predictor, figures / f"fitted_lines_{label}.png", title=label
    )
    visualizations.plot_taxon_facets(data, diagnostics, predictor, figures / f"facets_{label}.png")
    visualizations.plot_residuals(diagnostics, figures / f"residuals_{label}.png")
    return diagnostics


def run_shrinkage_analysis(
    data: pd.DataFrame,
    model: FittedMixedModel,
    output_dir: Path | None = None,
) -> pd.DataFrame:
    """Build the per-taxon summary table and the partial-pooling plots."""
    output_dir = Path(output_dir or config.RESULTS_DIR)
    logging.info("Summarising taxon estimates for %s…", model.spec.label)
    summary = shrinkage.taxon_summary(model, data)
    file_io.write_csv(summary, output_dir / f"taxon_summary_{model.spec.label}.csv")

    fixed = model.fixed_effects
    figures = output_dir / "figures"
    visualizations.plot_shrinkage(
        summary,
        float(fixed["Intercept"]),
        float(fixed[model.spec.predictors[0]]),
        figures / f"shrinkage_{model.spec.label}.png",
    )
    visualizations.plot_random_effects(summary, figures / f"random_effects_{model.spec.label}.png")
    return summary


def run_schedule(input_path: Path | None = None) -> pd.DataFrame:
    """Load the course schedule table."""
    input_path = Path(input_path or config.RAW_DATA_DIR / config.SCHEDULE_FILE)
    return schedule.load_schedule(input_path)


def run_analysis(
    input_path: Path | None = None,
    output_dir: Path | None = None,
    prepared_path: Path | None = None,
    schedule_path: Path | None = None,
) -> dict[str, FittedMixedModel]:
    """Run the whole workflow end to end.

    load -> derive columns -> save -> fit -> residuals -> plot ->
    refit with the taxon-mean predictor -> plot -> shrinkage summary.

    When `schedule_path` is given the course schedule is read first, so a
    missing or unreadable schedule stops the run before any fitting.
    """
    output_dir = Path(output_dir or config.RESULTS_DIR)
    if schedule_path is not None:
        sessions = run_schedule(schedule_path)
        logging.info("Course schedule lists %d sessions", len(sessions))
    data = run_data_preparation(input_path, prepared_path)

    visualizations.plot_scatter_by_taxon(
        data,
        config.CENTERED_WING_COL,
        config.LOG_BEAK_COL,
        output_dir / "figures" / "scatter_by_taxon.png",
    )

    models = run_model_fitting(data, output_dir)
    for name, model in models.items():
        run_diagnostics(data, model, output_dir, label=name)

    run_shrinkage_analysis(data, models["random_slope"], output_dir)
    logging.info("Analysis complete; results in %s", output_dir)
    return models

# tests/test_visualizations.py
"""Tests for the diagnostic figures."""

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from bird_mixed_models.analysis import visualizations
from bird_mixed_models.analysis.diagnostics import extract_diagnostics
from bird_mixed_models.analysis.shrinkage import taxon_summary


class TestPlots:
    """Each plot writes one PNG and leaves no open figures."""

    def _assert_written(self, path: Path):
        assert path.exists()
        assert path.stat().st_size > 0
        assert plt.get_fignums() == []

    def test_scatter(self, prepared, temp_dir: Path):
        path = visualizations.plot_scatter_by_taxon(
            prepared, "c_log_wing_length", "log_beak_height", temp_dir / "scatter.png"
        )
        self._assert_written(path)

    def test_fitted_lines_and_facets(self, slope_model, prepared, temp_dir: Path):
        diagnostics = extract_diagnostics(slope_model, prepared)

        lines = visualizations.plot_fitted_lines(
            prepared, diagnostics, "c_log_wing_length", temp_dir / "lines.png"
        )
        facets = visualizations.plot_taxon_facets(
            prepared, diagnostics, "c_log_wing_length", temp_dir / "figs" / "facets.png", max_facets=5
        )
        self._assert_written(lines)
        self._assert_written(facets)

    def test_residuals(self, intercept_model, prepared, temp_dir: Path):
        diagnostics = extract_diagnostics(intercept_model, prepared)
        self._assert_written(visualizations.plot_residuals(diagnostics, temp_dir / "resid.png"))

    def test_shrinkage_and_random_effects(self, slope_model, prepared, temp_dir: Path):
        summary = taxon_summary(slope_model, prepared)
        fixed = slope_model.fixed_effects

        shrink = visualizations.plot_shrinkage(
            summary, fixed["Intercept"], fixed["c_log_wing_length"], temp_dir / "shrink.png"
        )
        re_plot = visualizations.plot_random_effects(summary, temp_dir / "re.png")
        self._assert_written(shrink)
        self._assert_written(re_plot)

    def test_facets_without_taxa(self, temp_dir: Path):
        data = pd.DataFrame({"c_log_wing_length": pd.Series(dtype=float)})
        diagnostics = pd.DataFrame(
            {col: pd.Series(dtype=float) for col in ("observed", "fitted", "marginal_fitted")}
        )
        diagnostics.insert(0, "taxon", pd.Series(dtype=object))

        path = visualizations.plot_taxon_facets(
            data, diagnostics, "c_log_wing_length", temp_dir / "empty_facets.png"
        )
        self._assert_written(path)

"""Diagnostic figures for the mixed-model workflow.

Every function writes a single PNG, closes its figure and returns the
path it wrote.
"""

from __future__ import annotations

import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .. import config


def _save(fig, output_path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=config.FIGURE_DPI)
    plt.close(fig)
    return output_path


def plot_scatter_by_taxon(
    data: pd.DataFrame,
    x: str,
    y: str,
    output_path,
    group: str = config.TAXON_COL,
) -> Path:
    """Scatter of `y` against `x`, one colour per taxon."""
    fig, ax = plt.subplots(figsize=(7, 5))
    for _, sub in data.groupby(group, sort=True):
        ax.scatter(sub[x], sub[y], s=12, alpha=0.6)
    ax.set_xlabel(x)
    ax.set_ylabel(y)
    ax.set_title(f"{y} by {x} ({data[group].nunique()} taxa)")
    return _save(fig, output_path)


def plot_fitted_lines(
    data: pd.DataFrame,
    diagnostics: pd.DataFrame,
    x: str,
    output_path,
    title: str | None = None,
) -> Path:
    """Observations with one fitted line per taxon and the population line."""
    frame = data[[x]].join(diagnostics[["taxon", "observed", "fitted", "marginal_fitted"]])
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.scatter(frame[x], frame["observed"], s=10, color="0.6", alpha=0.5)
    for _, sub in frame.groupby("taxon", sort=True):
        sub = sub.sort_values(x)
        ax.plot(sub[x], sub["fitted"], linewidth=0.8, alpha=0.8)
    population = frame.sort_values(x)
    ax.plot(population[x], population["marginal_fitted"], color="black", linewidth=2, label="population")
    ax.set_xlabel(x)
    ax.set_ylabel("response")
    ax.set_title(title or "Fitted lines by taxon")
    ax.legend(loc="best")
    return _save(fig, output_path)


def plot_taxon_facets(
    data: pd.DataFrame,
    diagnostics: pd.DataFrame,
    x: str,
    output_path,
    max_facets: int = config.MAX_FACETS,
) -> Path:
    """One panel per taxon (largest taxa first) with data and fitted line."""
    frame = data[[x]].join(diagnostics[["taxon", "observed", "fitted", "marginal_fitted"]])
    taxa = frame["taxon"].value_counts().index[:max_facets]
    n_cols = max(1, min(4, len(taxa)))
    n_rows = max(1, math.ceil(len(taxa) / n_cols))
    fig, axes = plt.subplots(
        n_rows, n_cols, figsize=(3 * n_cols, 2.6 * n_rows), sharex=True, sharey=True, squeeze=False
    )
    for ax, taxon in zip(axes.flat, taxa):
        sub = frame[frame["taxon"] == taxon].sort_values(x)
        ax.scatter(sub[x], sub["observed"], s=10, alpha=0.7)
        ax.plot(sub[x], sub["fitted"], color="tab:red", linewidth=1.2)
        ax.plot(sub[x], sub["marginal_fitted"], color="black", linestyle="--", linewidth=0.8)
        ax.set_title(f"{taxon} (n={len(sub)})", fontsize=8)
    for ax in list(axes.flat)[len(taxa):]:
        ax.set_visible(False)
    return _save(fig, output_path)


def plot_residuals(diagnostics: pd.DataFrame, output_path) -> Path:
    """Residuals against fitted values, and their distribution."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(10, 4))
    ax1.scatter(diagnostics["fitted"], diagnostics["residual"], s=10, alpha=0.6)
    ax1.axhline(0.0, color="black", linestyle="--", linewidth=0.8)
    ax1.set_xlabel("Fitted value")
    ax1.set_ylabel("Residual")
    ax1.set_title("Residuals vs fitted")

    ax2.hist(diagnostics["residual"].dropna(), bins=30)
    ax2.set_xlabel("Residual")
    ax2.set_ylabel("Count")
    ax2.set_title("Residual distribution")
    return _save(fig, output_path)


def plot_shrinkage(
    summary: pd.DataFrame,
    population_intercept: float,
    population_slope: float,
    output_path,
) -> Path:
    """Per-taxon (intercept, slope): no pooling vs partial pooling.

    Arrows run from the separate OLS estimate to the mixed-model
    estimate; marker size follows the number of observations.
    """
    frame = summary.dropna(subset=["no_pooling_intercept", "no_pooling_slope"])
    sizes = 10 + 40 * np.sqrt(frame["n"] / max(frame["n"].max(), 1)) if len(frame) else 10
    fig, ax = plt.subplots(figsize=(7, 6))
    ax.scatter(frame["no_pooling_intercept"], frame["no_pooling_slope"], s=sizes,
               facecolors="none", edgecolors="tab:blue", label="no pooling")
    ax.scatter(frame["intercept"], frame["slope"], s=sizes, color="tab:red", label="partial pooling")
    for row in frame.itertuples(index=False):
        ax.annotate(
            "",
            xy=(row.intercept, row.slope),
            xytext=(row.no_pooling_intercept, row.no_pooling_slope),
            arrowprops={"arrowstyle": "->", "color": "0.5", "linewidth": 0.6},
        )
    ax.scatter([population_intercept], [population_slope], marker="X", s=120, color="black",
               label="population")
    ax.set_xlabel("Intercept")
    ax.set_ylabel("Slope")
    ax.set_title("Shrinkage of taxon estimates")
    ax.legend(loc="best")
    return _save(fig, output_path)


def plot_random_effects(summary: pd.DataFrame, output_path) -> Path:
    """Random intercepts and slopes against the taxon's mean predictor."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(10, 4))
    ax1.scatter(summary["mean_c_log_wing_length"], summary["random_intercept"], s=14)
    ax1.axhline(0.0, color="black", linewidth=0.8)
    ax1.set_xlabel("Mean centred log wing length")
    ax1.set_ylabel("Random intercept")

    ax2.scatter(summary["mean_c_log_wing_length"], summary["random_slope"], s=14)
    ax2.axhline(0.0, color="black", linewidth=0.8)
    ax2.set_xlabel("Mean centred log wing length")
    ax2.set_ylabel("Random slope")
    return _save(fig, output_path)

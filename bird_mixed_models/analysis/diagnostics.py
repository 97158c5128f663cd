"""
Fitted values, residuals and model comparison.

`extract_diagnostics` is a pure function of a fitted model and a data
frame; it returns one row per input row in the same order and with the
same index.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd
from scipy import stats

from .mixed_models import FittedMixedModel


def extract_diagnostics(model: FittedMixedModel, data: pd.DataFrame) -> pd.DataFrame:
    """Return observed, fitted and residual values for each row of `data`.

    Columns
    -------
    taxon : group label of the row
    observed : response value
    fitted : prediction including the group's random effects
    marginal_fitted : population-level prediction (fixed effects only)
    residual : observed - fitted
    """
    spec = model.spec
    observed = data[spec.response].astype(float)
    fitted = model.predict(data, include_random=True)
    marginal = model.predict(data, include_random=False)
    return pd.DataFrame(
        {
            "taxon": data[spec.group],
            "observed": observed,
            "fitted": fitted,
            "marginal_fitted": marginal,
            "residual": observed - fitted,
        },
        index=data.index,
    )


def residual_variance(diagnostics: pd.DataFrame) -> float:
    """Sample variance of the conditional residuals."""
    return float(np.var(diagnostics["residual"].to_numpy(), ddof=1))


def residual_variance_not_increased(
    simpler: FittedMixedModel, richer: FittedMixedModel, rtol: float = 1e-8
) -> bool:
    """True if the richer model's residual variance is no larger than the simpler one's."""
    base = simpler.variance_components["residual_var"]
    extended = richer.variance_components["residual_var"]
    return extended <= base * (1.0 + rtol)


def likelihood_ratio_test(
    simpler: FittedMixedModel, richer: FittedMixedModel
) -> tuple[float, int, float]:
    """Likelihood-ratio statistic, degrees of freedom and chi-square p-value.

    Both models must be fitted by maximum likelihood to the same rows.
    When the extra parameters are variance components the null value lies
    on the boundary and the chi-square p-value is conservative.
    """
    if simpler.result.reml or richer.result.reml:
        raise ValueError("Likelihood-ratio tests need maximum-likelihood fits (reml=False)")
    if simpler.n_obs != richer.n_obs:
        raise ValueError(
            f"Models were fitted to different data ({simpler.n_obs} vs {richer.n_obs} rows)"
        )
    df = richer.n_params - simpler.n_params
    if df <= 0:
        raise ValueError(f"{richer.spec.label} does not extend {simpler.spec.label}")
    statistic = max(2.0 * (richer.log_likelihood - simpler.log_likelihood), 0.0)
    p_value = float(stats.chi2.sf(statistic, df))
    return statistic, df, p_value


def compare_models(models: Sequence[FittedMixedModel]) -> pd.DataFrame:
    """Summarise a sequence of nested models, simplest first.

    Each row after the first carries the likelihood-ratio test against the
    row before it.
    """
    rows = []
    previous = None
    for model in models:
        row = {
            "model": model.spec.label,
            "formula": model.spec.formula,
            "re_formula": model.spec.re_formula or "~1",
            "n_params": model.n_params,
            "log_likelihood": model.log_likelihood,
            "aic": model.aic,
            "bic": model.bic,
            "residual_var": model.variance_components["residual_var"],
            "converged": model.converged,
            "lr_stat": np.nan,
            "lr_df": np.nan,
            "lr_pvalue": np.nan,
        }
        if previous is not None:
            stat, df, p_value = likelihood_ratio_test(previous, model)
            row.update(lr_stat=stat, lr_df=df, lr_pvalue=p_value)
            if not residual_variance_not_increased(previous, model):
                logging.warning(
                    "Residual variance increased from %s to %s",
                    previous.spec.label,
                    model.spec.label,
                )
        rows.append(row)
        previous = model
    return pd.DataFrame(rows)

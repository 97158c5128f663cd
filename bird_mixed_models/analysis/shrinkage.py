"""
Per-taxon summaries for the partial-pooling discussion.

The mixed model's per-taxon lines are compared with separate ordinary
least-squares fits per taxon (no pooling).  Taxa with few observations
are pulled furthest toward the population line.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from .mixed_models import FittedMixedModel


def no_pooling_estimates(
    data: pd.DataFrame, response: str, predictor: str, group: str
) -> pd.DataFrame:
    """Intercept and slope from a separate OLS fit for every group.

    Groups with fewer than two rows or no spread in `predictor` get NaN
    estimates.
    """
    rows = []
    for label, sub in data.groupby(group, sort=True):
        intercept = slope = np.nan
        if len(sub) >= 2 and sub[predictor].nunique() > 1:
            fit = smf.ols(f"{response} ~ {predictor}", data=sub).fit()
            intercept = float(fit.params["Intercept"])
            slope = float(fit.params[predictor])
        rows.append({group: label, "no_pooling_intercept": intercept, "no_pooling_slope": slope})
    out = pd.DataFrame(rows).set_index(group)
    logging.debug("No-pooling fits for %d groups (%d undetermined)",
                  len(out), int(out["no_pooling_slope"].isna().sum()))
    return out


def taxon_summary(model: FittedMixedModel, data: pd.DataFrame) -> pd.DataFrame:
    """One row per taxon with pooled and unpooled line estimates.

    Columns: `taxon`, `n`, `mean_c_log_wing_length` (mean of the model's
    first predictor), `random_intercept`, `random_slope`, `intercept`,
    `slope`, `no_pooling_intercept`, `no_pooling_slope`.
    """
    spec = model.spec
    predictor = spec.predictors[0]
    fixed = model.fixed_effects

    grouped = data.groupby(spec.group, sort=True)
    summary = pd.DataFrame(
        {
            "n": grouped.size(),
            "mean_c_log_wing_length": grouped[predictor].mean(),
        }
    )

    re = model.random_effects.reindex(summary.index).fillna(0.0)
    summary["random_intercept"] = re["intercept"]
    summary["random_slope"] = re["slope"] if "slope" in re.columns else 0.0

    # Additional fixed predictors are constant within a taxon (e.g. the
    # taxon mean); fold them into the taxon's intercept.
    extra = pd.Series(0.0, index=summary.index)
    for other in spec.predictors[1:]:
        extra = extra + float(fixed[other]) * grouped[other].mean()
    summary["intercept"] = float(fixed["Intercept"]) + extra + summary["random_intercept"]
    summary["slope"] = float(fixed[predictor]) + summary["random_slope"]

    unpooled = no_pooling_estimates(data, spec.response, predictor, spec.group)
    summary = summary.join(unpooled)
    summary.index.name = spec.group
    return summary.reset_index()


def shrinkage_distance(summary: pd.DataFrame, population_slope: float) -> pd.DataFrame:
    """Distance of pooled and unpooled slopes from the population slope.

    Rows without a no-pooling estimate are dropped.
    """
    out = summary.dropna(subset=["no_pooling_slope"]).copy()
    out["pooled_distance"] = (out["slope"] - population_slope).abs()
    out["unpooled_distance"] = (out["no_pooling_slope"] - population_slope).abs()
    return out

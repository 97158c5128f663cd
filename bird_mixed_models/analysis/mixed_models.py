"""
Linear mixed-effects models for the morphology data.

Models are fitted with `statsmodels` MixedLM by maximum likelihood so
that nested models with different fixed effects can be compared by
likelihood.  A `ModelSpec` names the response, the fixed-effect
predictors and the grouping column, and says whether the slope of the
first predictor varies by group:

    random intercept           y ~ x + (1 | taxon)
    random intercept + slope   y ~ x + (1 + x | taxon)

The fitted result is wrapped in `FittedMixedModel`, which exposes the
pieces the diagnostics and shrinkage modules need with stable names.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from .. import config
from ..data_processing.transforms import taxon_counts

RANDOM_EFFECT_COLUMNS = ("intercept", "slope")


class ModelFitError(RuntimeError):
    """Raised when the underlying library fails to fit a model."""


@dataclass
class ModelSpec:
    """Description of one mixed model.

    `predictors` may be a single column name or a sequence of names.
    With `random_slope=True` the coefficient of the first predictor
    varies by group alongside the intercept.
    """

    response: str
    predictors: Sequence[str]
    group: str = config.TAXON_COL
    random_slope: bool = False
    name: str | None = None

    def __post_init__(self):
        if isinstance(self.predictors, str):
            self.predictors = (self.predictors,)
        self.predictors = tuple(self.predictors)
        if not self.predictors:
            raise ValueError("A model needs at least one fixed-effect predictor")

    @property
    def formula(self) -> str:
        return f"{self.response} ~ " + " + ".join(self.predictors)

    @property
    def re_formula(self) -> str | None:
        if self.random_slope:
            return f"~{self.predictors[0]}"
        return None

    @property
    def columns(self) -> list[str]:
        return [self.response, *self.predictors, self.group]

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        kind = "random_slope" if self.random_slope else "random_intercept"
        return f"{kind}:{self.formula}"


@dataclass
class FittedMixedModel:
    """A fitted mixed model together with the spec that produced it."""

    spec: ModelSpec
    result: object
    converged: bool
    fit_warnings: list[str] = field(default_factory=list)

    @property
    def fixed_effects(self) -> pd.Series:
        return self.result.fe_params.copy()

    @property
    def random_effects(self) -> pd.DataFrame:
        """Per-group random effects (BLUPs), one row per group.

        Columns are `intercept` and, for random-slope models, `slope`.
        """
        re = pd.DataFrame.from_dict(self.result.random_effects, orient="index")
        re.columns = list(RANDOM_EFFECT_COLUMNS[: re.shape[1]])
        re.index.name = self.spec.group
        return re.sort_index().astype(float)

    @property
    def variance_components(self) -> dict[str, float]:
        cov_re = np.asarray(self.result.cov_re, dtype=float)
        components = {"group_intercept_var": float(cov_re[0, 0])}
        if cov_re.shape[0] > 1:
            components["group_slope_var"] = float(cov_re[1, 1])
            components["group_cov"] = float(cov_re[0, 1])
        components["residual_var"] = float(self.result.scale)
        return components

    @property
    def log_likelihood(self) -> float:
        return float(self.result.llf)

    @property
    def aic(self) -> float:
        return float(self.result.aic)

    @property
    def bic(self) -> float:
        return float(self.result.bic)

    @property
    def n_obs(self) -> int:
        return int(self.result.nobs)

    @property
    def n_groups(self) -> int:
        return len(self.result.random_effects)

    @property
    def n_params(self) -> int:
        """Fixed effects, random-effects covariance terms and the residual variance."""
        k_re = 2 if self.spec.random_slope else 1
        return len(self.result.fe_params) + k_re * (k_re + 1) // 2 + 1

    def predict(self, data: pd.DataFrame, include_random: bool = True) -> pd.Series:
        """Predicted response for each row of `data`, aligned on its index.

        With `include_random` the group-specific line is used; groups not
        seen during fitting get the population-level line.
        """
        fixed = self.result.fe_params
        pred = pd.Series(float(fixed["Intercept"]), index=data.index)
        for predictor in self.spec.predictors:
            pred = pred + float(fixed[predictor]) * data[predictor].astype(float)

        if include_random:
            re = self.random_effects.reindex(data[self.spec.group].to_numpy()).fillna(0.0)
            pred = pred + re["intercept"].to_numpy()
            if "slope" in re.columns:
                x = data[self.spec.predictors[0]].to_numpy(dtype=float)
                pred = pred + re["slope"].to_numpy() * x
        return pred.rename("predicted")

    def summary_text(self) -> str:
        return self.result.summary().as_text()

    def overview(self) -> dict:
        """Plain-dict description of the fit, suitable for JSON."""
        return {
            "name": self.spec.label,
            "formula": self.spec.formula,
            "re_formula": self.spec.re_formula or "~1",
            "group": self.spec.group,
            "n_obs": self.n_obs,
            "n_groups": self.n_groups,
            "converged": self.converged,
            "log_likelihood": self.log_likelihood,
            "aic": self.aic,
            "bic": self.bic,
            "fixed_effects": {k: float(v) for k, v in self.fixed_effects.items()},
            "variance_components": self.variance_components,
            "warnings": list(self.fit_warnings),
        }


def _check_columns(data: pd.DataFrame, spec: ModelSpec) -> None:
    missing = [col for col in spec.columns if col not in data.columns]
    if missing:
        raise KeyError(f"Model {spec.label} references missing column(s): {', '.join(missing)}")


def small_groups(data: pd.DataFrame, group: str, min_size: int = config.MIN_GROUP_SIZE) -> list:
    """Groups with fewer than `min_size` observations."""
    counts = taxon_counts(data, group)
    return sorted(counts[counts < min_size].index.tolist())


def fit_mixed_model(
    data: pd.DataFrame,
    spec: ModelSpec,
    reml: bool = False,
    method: str | None = None,
) -> FittedMixedModel:
    """Fit one mixed model and wrap the result.

    Parameters
    ----------
    data : pandas.DataFrame
        Observation table containing every column named by `spec`.
    spec : ModelSpec
        Response, predictors, grouping column and random-effects structure.
    reml : bool
        Fit by REML instead of maximum likelihood.  Information criteria
        are undefined (NaN) for REML fits.
    method : str, optional
        Optimiser passed to statsmodels; defaults to `config.OPTIMIZER`.
        Exactly one optimisation pass is made.

    Notes
    -----
    Non-convergence is logged and recorded on the returned object; it is
    not retried.  Failures inside statsmodels are logged and re-raised as
    `ModelFitError`.
    """
    _check_columns(data, spec)
    method = method or config.OPTIMIZER
    if not isinstance(method, str):
        raise TypeError(f"method must be a single optimiser name, got {method!r}")

    tiny = small_groups(data, spec.group)
    if tiny:
        logging.warning(
            "%d group(s) have fewer than %d observations; their random effects "
            "will be strongly shrunk: %s",
            len(tiny),
            config.MIN_GROUP_SIZE,
            ", ".join(map(str, tiny[:10])) + (" ..." if len(tiny) > 10 else ""),
        )

    logging.info(
        "Fitting %s (random effects %s by %s)",
        spec.formula,
        spec.re_formula or "~1",
        spec.group,
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            model = smf.mixedlm(spec.formula, data, groups=spec.group, re_formula=spec.re_formula)
            result = model.fit(reml=reml, method=method)
        except Exception as exc:
            logging.error("Error fitting mixed model %s: %s", spec.label, exc)
            raise ModelFitError(f"Failed to fit {spec.label}") from exc

    messages = []
    for w in caught:
        if issubclass(w.category, (ConvergenceWarning, UserWarning, RuntimeWarning)):
            messages.append(f"{w.category.__name__}: {w.message}")
            logging.warning("%s: %s", spec.label, w.message)
        else:
            logging.debug("%s: %s: %s", spec.label, w.category.__name__, w.message)

    converged = bool(getattr(result, "converged", True))
    if not converged:
        logging.warning("Optimiser did not converge for %s; estimates may be unreliable", spec.label)

    return FittedMixedModel(spec=spec, result=result, converged=converged, fit_warnings=messages)


def tutorial_specs(
    response: str = config.LOG_BEAK_COL,
    predictor: str = config.CENTERED_WING_COL,
    group: str = config.TAXON_COL,
    taxon_mean: str = config.TAXON_MEAN_COL,
) -> list[ModelSpec]:
    """The three nested models of the workflow, simplest first."""
    return [
        ModelSpec(response, (predictor,), group, random_slope=False, name="random_intercept"),
        ModelSpec(response, (predictor,), group, random_slope=True, name="random_slope"),
        ModelSpec(
            response,
            (predictor, taxon_mean),
            group,
            random_slope=True,
            name="random_slope_taxon_mean",
        ),
    ]

"""
Bird Morphology Mixed Models Package

This package provides modular components for loading bird morphology
measurements, deriving model predictors, fitting random-intercept and
random-slope mixed-effects models across taxa, extracting diagnostics,
and summarising shrinkage of per-taxon estimates.  Modules are organised
by stage and can be used independently or orchestrated together through
the high‑level pipeline functions.
"""

from . import config  # noqa: F401
from . import pipelines  # noqa: F401

__all__ = [
    "config",
    "pipelines",
]

"""
Subpackage for statistical modelling and analysis.

This package contains modules for fitting mixed-effects models,
extracting residual diagnostics, summarising per-taxon shrinkage and
generating visualisations.
"""

__all__ = ["mixed_models", "diagnostics", "shrinkage", "visualizations"]

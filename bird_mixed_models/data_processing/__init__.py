"""
Subpackage for deriving model columns from the observation table.

Each helper appends one column and returns a new frame, leaving the
input untouched.
"""

__all__ = ["transforms"]

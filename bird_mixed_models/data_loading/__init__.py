"""
Subpackage for reading the workflow's input tables.

`morphology` loads and validates the observation table; `schedule`
loads the course schedule spreadsheet.
"""

__all__ = ["morphology", "schedule"]

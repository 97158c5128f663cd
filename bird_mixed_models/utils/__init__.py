"""Shared helpers."""

__all__ = ["file_io"]

"""Thin wrappers over the host platform."""

from .process import ProcessError, run

__all__ = ["ProcessError", "run"]

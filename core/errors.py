"""
Error types raised at the engine boundary.
"""

from __future__ import annotations


class InvalidParameterError(ValueError):
    """
    A parameter handed to an engine (or used to build one) is out of its domain.

    Subclasses ValueError so callers that already guard engine calls with
    `except ValueError` keep working.
    """

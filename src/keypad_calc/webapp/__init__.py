"""
Web front-end for keypad-calc.

Provides the calculator page and its JSON API.
"""

from .server import app

__all__ = ["app"]
